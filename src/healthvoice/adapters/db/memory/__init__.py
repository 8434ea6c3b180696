"""In-process stores used by default and in tests."""

from .account_repository import InMemoryAccountRepository
from .appointment_repository import InMemoryAppointmentRepository

__all__ = ["InMemoryAccountRepository", "InMemoryAppointmentRepository"]
