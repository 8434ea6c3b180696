"""
Status and role enums for the triage conversation and appointment queue.
"""

from enum import Enum


class Language(str, Enum):
    """Conversation languages supported by the assistant."""
    ENGLISH = "en"
    HINDI = "hi"
    TAMIL = "ta"


class Sender(str, Enum):
    """Author of a conversation message."""
    USER = "USER"
    BOT = "BOT"


class UserRole(str, Enum):
    """Account roles."""
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class AppointmentStatus(str, Enum):
    """Appointment lifecycle states, in the only order they may be visited."""

    SCHEDULED = "scheduled"      # Initial state, waiting in the queue
    IN_PROGRESS = "in-progress"  # Called in by the doctor
    COMPLETED = "completed"      # Terminal

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = [
    AppointmentStatus.SCHEDULED,
    AppointmentStatus.IN_PROGRESS,
    AppointmentStatus.COMPLETED,
]


class BookingStatus(str, Enum):
    """Booking progress of a patient session."""
    IDLE = "idle"
    BOOKING = "booking"
    BOOKED = "booked"
