"""
Enumerations shared across the triage and queue workflows.
"""

from .triage import AppointmentStatus, BookingStatus, Language, Sender, UserRole

__all__ = [
    "AppointmentStatus",
    "BookingStatus",
    "Language",
    "Sender",
    "UserRole",
]
