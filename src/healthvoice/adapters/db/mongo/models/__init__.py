"""Beanie document models."""

from .account_m import AccountMongo
from .appointment_m import AppointmentMongo

DOCUMENT_MODELS = [AccountMongo, AppointmentMongo]

__all__ = ["AccountMongo", "AppointmentMongo", "DOCUMENT_MODELS"]
