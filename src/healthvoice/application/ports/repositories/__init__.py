"""Repository ports."""

from .account_repo import AccountRepository
from .appointment_repo import AppointmentRepository

__all__ = ["AccountRepository", "AppointmentRepository"]
