"""
Appointment repository interface: the durable, shared appointment store.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.appointment import Appointment


class AppointmentRepository(ABC):
    """Abstract store for appointment records.

    Every mutation is a whole-record replace keyed by appointment id and
    guarded by the record's ``version``.
    """

    @abstractmethod
    async def create(
        self,
        patient_id: str,
        patient_name: str,
        symptoms_summary: str,
        idempotency_key: Optional[str] = None,
    ) -> Appointment:
        """Create a scheduled appointment for today at the current time slot.

        When ``idempotency_key`` matches an earlier create, that record is
        returned instead of a new one.
        """
        pass

    @abstractmethod
    async def update(self, appointment: Appointment) -> Optional[Appointment]:
        """Replace the stored record with ``appointment``.

        Returns the stored copy (with its version bumped), or ``None`` when
        no record has that id. Raises ``AppointmentConflictError`` on a
        stale version.
        """
        pass

    @abstractmethod
    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        """Find an appointment by ID."""
        pass

    @abstractmethod
    async def find_all(self) -> List[Appointment]:
        """All appointments in insertion order."""
        pass

    @abstractmethod
    async def get_doctor_appointments(self, doctor_id: str) -> List[Appointment]:
        """The doctor's working list: in-progress first, then by time slot."""
        pass

    @abstractmethod
    async def seed(self, appointments: List[Appointment]) -> int:
        """Insert pre-built records whose ids are not stored yet.

        Returns how many were inserted. No events are published.
        """
        pass
