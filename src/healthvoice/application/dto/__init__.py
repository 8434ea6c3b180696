"""Data transfer objects returned by the controllers."""

from .triage_dto import CallNextResult, SubmissionResult

__all__ = ["CallNextResult", "SubmissionResult"]
