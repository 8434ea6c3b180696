"""
In-memory implementation of AppointmentRepository.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from ....application.ports.repositories.appointment_repo import AppointmentRepository
from ....application.utils.queue_ordering import order_doctor_appointments
from ....core.event_bus import AppointmentEventBus
from ....core.utils.datetime_utils import current_time_slot, today_iso
from ....domain.entities.appointment import Appointment
from ....domain.errors import AppointmentConflictError
from ....domain.events import AppointmentCreated, AppointmentUpdated
from ....domain.value_objects.appointment_id import AppointmentId

logger = logging.getLogger("healthvoice.store")


class InMemoryAppointmentRepository(AppointmentRepository):
    """Dict-backed appointment store.

    Records are kept in insertion order. Callers always receive copies,
    so a record can only change through ``update``.
    """

    def __init__(
        self,
        event_bus: Optional[AppointmentEventBus] = None,
        default_doctor_id: str = "d1",
        filter_by_doctor: bool = False,
        id_factory: Callable[[], AppointmentId] = AppointmentId.generate,
    ) -> None:
        self._records: Dict[str, Appointment] = {}
        self._idempotency_index: Dict[str, str] = {}
        self._lock = asyncio.Lock()
        self._event_bus = event_bus
        self._default_doctor_id = default_doctor_id
        self._filter_by_doctor = filter_by_doctor
        self._id_factory = id_factory

    async def create(
        self,
        patient_id: str,
        patient_name: str,
        symptoms_summary: str,
        idempotency_key: Optional[str] = None,
    ) -> Appointment:
        async with self._lock:
            if idempotency_key and idempotency_key in self._idempotency_index:
                existing = self._records[self._idempotency_index[idempotency_key]]
                logger.info(
                    "Idempotent create returned existing appointment %s", existing.id
                )
                return replace(existing)

            appointment = Appointment(
                appointment_id=self._id_factory(),
                patient_id=patient_id,
                patient_name=patient_name,
                date=today_iso(),
                time_slot=current_time_slot(),
                symptoms_summary=symptoms_summary,
                doctor_id=self._default_doctor_id,
                idempotency_key=idempotency_key,
            )
            self._records[appointment.id] = appointment
            if idempotency_key:
                self._idempotency_index[idempotency_key] = appointment.id
            stored = replace(appointment)

        logger.info("Created appointment %s for patient %s", stored.id, stored.patient_id)
        await self._publish(AppointmentCreated(appointment=stored))
        return replace(stored)

    async def update(self, appointment: Appointment) -> Optional[Appointment]:
        async with self._lock:
            current = self._records.get(appointment.id)
            if current is None:
                logger.warning("Update ignored, appointment %s not found", appointment.id)
                return None
            if appointment.version != current.version:
                raise AppointmentConflictError(
                    appointment.id, appointment.version, current.version
                )
            current.check_update(appointment)

            stored = replace(
                appointment,
                version=current.version + 1,
                idempotency_key=current.idempotency_key,
                created_at=current.created_at,
            )
            self._records[stored.id] = stored

        logger.info(
            "Updated appointment %s to status=%s version=%d",
            stored.id,
            stored.status.value,
            stored.version,
        )
        await self._publish(AppointmentUpdated(appointment=replace(stored)))
        return replace(stored)

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        record = self._records.get(appointment_id)
        return replace(record) if record else None

    async def find_all(self) -> List[Appointment]:
        return [replace(a) for a in self._records.values()]

    async def get_doctor_appointments(self, doctor_id: str) -> List[Appointment]:
        return order_doctor_appointments(
            await self.find_all(), doctor_id, self._filter_by_doctor
        )

    async def seed(self, appointments: List[Appointment]) -> int:
        inserted = 0
        async with self._lock:
            for appointment in appointments:
                if appointment.id in self._records:
                    continue
                self._records[appointment.id] = replace(appointment)
                inserted += 1
        return inserted

    async def _publish(self, event) -> None:
        if self._event_bus is not None:
            await self._event_bus.publish(event)
