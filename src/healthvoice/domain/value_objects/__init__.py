"""
Value objects package for domain layer.
"""

from .appointment_id import AppointmentId
from .idempotency_key import IdempotencyKey
from .patient_id import PatientId

__all__ = [
    "AppointmentId",
    "IdempotencyKey",
    "PatientId",
]
