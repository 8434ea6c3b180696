"""MongoDB repository implementations."""

from .account_repository import MongoAccountRepository
from .appointment_repository import MongoAppointmentRepository

__all__ = ["MongoAccountRepository", "MongoAppointmentRepository"]
