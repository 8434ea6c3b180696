"""
Exception handling for HealthVoice.

Infrastructure-level exceptions. Business rule violations live in
``healthvoice.domain.errors``.
"""

from typing import Any, Dict, Optional


class HealthVoiceException(Exception):
    """Base exception class for HealthVoice."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(HealthVoiceException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class DatabaseError(HealthVoiceException):
    """Raised when there's a database operation error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "DATABASE_ERROR", details)


class ExternalServiceError(HealthVoiceException):
    """Raised when there's an external service error."""

    def __init__(
        self, service: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.service = service
        full_message = f"{service} service error: {message}"
        super().__init__(full_message, "EXTERNAL_SERVICE_ERROR", details)


class InferenceServiceError(ExternalServiceError):
    """Raised when the inference call fails or returns unusable output."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("Inference", message, details)
        self.error_code = "INFERENCE_ERROR"
