"""
MongoDB implementation of AppointmentRepository.
"""

import logging
from typing import List, Optional

from pymongo.errors import DuplicateKeyError

from healthvoice.application.ports.repositories.appointment_repo import AppointmentRepository
from healthvoice.application.utils.queue_ordering import order_doctor_appointments
from healthvoice.core.event_bus import AppointmentEventBus
from healthvoice.core.exceptions import DatabaseError
from healthvoice.core.utils.datetime_utils import current_time_slot, today_iso
from healthvoice.domain.entities.appointment import Appointment
from healthvoice.domain.errors import AppointmentConflictError
from healthvoice.domain.events import AppointmentCreated, AppointmentUpdated
from healthvoice.domain.value_objects.appointment_id import AppointmentId

from ..models.appointment_m import AppointmentMongo

logger = logging.getLogger("healthvoice.store.mongo")


class MongoAppointmentRepository(AppointmentRepository):
    """MongoDB implementation of AppointmentRepository.

    Updates are compare-and-set on ``(appointment_id, version)``.
    """

    def __init__(
        self,
        event_bus: Optional[AppointmentEventBus] = None,
        default_doctor_id: str = "d1",
        filter_by_doctor: bool = False,
    ) -> None:
        self._event_bus = event_bus
        self._default_doctor_id = default_doctor_id
        self._filter_by_doctor = filter_by_doctor

    async def create(
        self,
        patient_id: str,
        patient_name: str,
        symptoms_summary: str,
        idempotency_key: Optional[str] = None,
    ) -> Appointment:
        if idempotency_key:
            existing = await AppointmentMongo.find_one(
                AppointmentMongo.idempotency_key == idempotency_key
            )
            if existing:
                return self._mongo_to_domain(existing)

        appointment = Appointment(
            appointment_id=AppointmentId.generate(),
            patient_id=patient_id,
            patient_name=patient_name,
            date=today_iso(),
            time_slot=current_time_slot(),
            symptoms_summary=symptoms_summary,
            doctor_id=self._default_doctor_id,
            idempotency_key=idempotency_key,
        )
        try:
            await self._domain_to_mongo(appointment).insert()
        except DuplicateKeyError:
            # Lost a race with another create for the same key
            existing = await AppointmentMongo.find_one(
                AppointmentMongo.idempotency_key == idempotency_key
            )
            if existing is None:
                raise DatabaseError(
                    "Duplicate key on appointment insert",
                    {"appointment_id": appointment.id},
                )
            return self._mongo_to_domain(existing)

        logger.info("Created appointment %s for patient %s", appointment.id, patient_id)
        await self._publish(AppointmentCreated(appointment=appointment))
        return appointment

    async def update(self, appointment: Appointment) -> Optional[Appointment]:
        current_doc = await AppointmentMongo.find_one(
            AppointmentMongo.appointment_id == appointment.id
        )
        if current_doc is None:
            logger.warning("Update ignored, appointment %s not found", appointment.id)
            return None

        current = self._mongo_to_domain(current_doc)
        if appointment.version != current.version:
            raise AppointmentConflictError(appointment.id, appointment.version, current.version)
        current.check_update(appointment)

        new_version = current.version + 1
        result = await AppointmentMongo.find_one(
            AppointmentMongo.appointment_id == appointment.id,
            AppointmentMongo.version == current.version,
        ).update(
            {
                "$set": {
                    "status": appointment.status.value,
                    "notes": appointment.notes,
                    "version": new_version,
                }
            }
        )
        if result is None or result.matched_count == 0:
            latest = await self.find_by_id(appointment.id)
            actual = latest.version if latest else current.version
            raise AppointmentConflictError(appointment.id, appointment.version, actual)

        stored = Appointment(
            appointment_id=current.appointment_id,
            patient_id=current.patient_id,
            patient_name=current.patient_name,
            date=current.date,
            time_slot=current.time_slot,
            symptoms_summary=current.symptoms_summary,
            doctor_id=current.doctor_id,
            status=appointment.status,
            notes=appointment.notes,
            version=new_version,
            idempotency_key=current.idempotency_key,
            created_at=current.created_at,
        )
        await self._publish(AppointmentUpdated(appointment=stored))
        return stored

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        doc = await AppointmentMongo.find_one(AppointmentMongo.appointment_id == appointment_id)
        return self._mongo_to_domain(doc) if doc else None

    async def find_all(self) -> List[Appointment]:
        docs = await AppointmentMongo.find().sort("+created_at").to_list()
        return [self._mongo_to_domain(d) for d in docs]

    async def get_doctor_appointments(self, doctor_id: str) -> List[Appointment]:
        return order_doctor_appointments(
            await self.find_all(), doctor_id, self._filter_by_doctor
        )

    async def seed(self, appointments: List[Appointment]) -> int:
        inserted = 0
        for appointment in appointments:
            exists = await AppointmentMongo.find_one(
                AppointmentMongo.appointment_id == appointment.id
            )
            if exists:
                continue
            await self._domain_to_mongo(appointment).insert()
            inserted += 1
        return inserted

    async def _publish(self, event) -> None:
        if self._event_bus is not None:
            await self._event_bus.publish(event)

    def _domain_to_mongo(self, appointment: Appointment) -> AppointmentMongo:
        return AppointmentMongo(
            appointment_id=appointment.id,
            patient_id=appointment.patient_id,
            patient_name=appointment.patient_name,
            doctor_id=appointment.doctor_id,
            date=appointment.date,
            time_slot=appointment.time_slot,
            status=appointment.status.value,
            symptoms_summary=appointment.symptoms_summary,
            notes=appointment.notes,
            version=appointment.version,
            idempotency_key=appointment.idempotency_key,
            created_at=appointment.created_at,
        )

    def _mongo_to_domain(self, doc: AppointmentMongo) -> Appointment:
        return Appointment(
            appointment_id=AppointmentId(doc.appointment_id),
            patient_id=doc.patient_id,
            patient_name=doc.patient_name,
            date=doc.date,
            time_slot=doc.time_slot,
            symptoms_summary=doc.symptoms_summary,
            doctor_id=doc.doctor_id,
            status=doc.status,
            notes=doc.notes,
            version=doc.version,
            idempotency_key=doc.idempotency_key,
            created_at=doc.created_at,
        )
