"""
Doctor controller: the clinic-side view of the appointment queue.

Keeps a cached, ordered copy of the doctor's appointments. The cache is
updated from store events as they happen, re-read after every local
mutation, and re-read on a fixed interval as a fallback.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Callable, List, Optional

from ..dto.triage_dto import CallNextResult
from ..ports.repositories.appointment_repo import AppointmentRepository
from ..use_cases.add_walk_in_patient import AddWalkInPatientRequest, AddWalkInPatientUseCase
from ..utils.queue_ordering import QueueView, order_doctor_appointments, partition_queue
from ...core.constants import QUEUE_EMPTY_MESSAGE
from ...core.event_bus import AppointmentEventBus
from ...core.structured_logger import get_logger
from ...domain.entities.appointment import Appointment
from ...domain.errors import (
    AppointmentConflictError,
    AppointmentNotFoundError,
    ConsultationAlreadyActiveError,
    NoActiveConsultationError,
)
from ...domain.events import AppointmentEvent

logger = logging.getLogger("healthvoice.doctor")


class DoctorController:
    """Coordinates one doctor's dashboard.

    At most one appointment on the doctor's list may be in progress; the
    controller refuses to start a second one.
    """

    def __init__(
        self,
        doctor_id: str,
        appointment_repository: AppointmentRepository,
        add_walk_in_patient: AddWalkInPatientUseCase,
        event_bus: Optional[AppointmentEventBus] = None,
        poll_interval_seconds: float = 5.0,
        filter_by_doctor: bool = False,
    ) -> None:
        self.doctor_id = doctor_id
        self._appointment_repository = appointment_repository
        self._add_walk_in_patient = add_walk_in_patient
        self._event_bus = event_bus
        self._poll_interval = poll_interval_seconds
        self._filter_by_doctor = filter_by_doctor
        self._log = get_logger("healthvoice.doctor")

        self.appointments: List[Appointment] = []
        self.active_appointment: Optional[Appointment] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # Cache maintenance
    # ------------------------------------------------------------------

    async def refresh(self) -> List[Appointment]:
        """Re-read the doctor's list from the store."""
        self.appointments = await self._appointment_repository.get_doctor_appointments(
            self.doctor_id
        )
        self._sync_active()
        return self.appointments

    def apply_event(self, event: AppointmentEvent) -> None:
        """Fold a store event into the cache, keeping the list ordering."""
        incoming = event.appointment
        if self._filter_by_doctor and incoming.doctor_id != self.doctor_id:
            return

        rows = list(self.appointments)
        for index, cached in enumerate(rows):
            if cached.id == incoming.id:
                # Events can arrive after a newer poll result
                if incoming.version < cached.version:
                    return
                rows[index] = replace(incoming)
                break
        else:
            rows.append(replace(incoming))

        self.appointments = order_doctor_appointments(rows)
        self._sync_active()

    def _sync_active(self) -> None:
        if self.active_appointment is None:
            return
        latest = self._find_cached(self.active_appointment.id)
        if latest is not None:
            self.active_appointment = latest

    def _find_cached(self, appointment_id: str) -> Optional[Appointment]:
        for appointment in self.appointments:
            if appointment.id == appointment_id:
                return appointment
        return None

    async def start(self) -> None:
        """Load the list, subscribe to store events and start the fallback poll."""
        await self.refresh()
        if self._event_bus is not None and self._unsubscribe is None:
            self._unsubscribe = self._event_bus.subscribe(self.apply_event)
        if self._poll_task is None:
            self._poll_task = asyncio.create_task(self._poll_forever())
        logger.info(
            "Doctor view started doctor_id=%s poll_interval=%ss", self.doctor_id, self._poll_interval
        )

    async def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._poll_task is not None:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None

    async def _poll_forever(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            try:
                await self.refresh()
            except Exception as e:
                logger.error("Queue refresh failed for doctor %s: %s", self.doctor_id, e, exc_info=True)

    # ------------------------------------------------------------------
    # Queue views
    # ------------------------------------------------------------------

    @property
    def queue(self) -> QueueView:
        return partition_queue(self.appointments)

    @property
    def waiting(self) -> List[Appointment]:
        return self.queue.waiting

    @property
    def in_consultation(self) -> List[Appointment]:
        return self.queue.in_consultation

    @property
    def completed(self) -> List[Appointment]:
        return self.queue.completed

    def search_records(self, term: str) -> List[Appointment]:
        """Case-insensitive match on name, symptoms or notes."""
        return [a for a in self.appointments if a.matches(term)]

    # ------------------------------------------------------------------
    # Consultation flow
    # ------------------------------------------------------------------

    async def call_next_patient(self) -> CallNextResult:
        """Start the first waiting appointment, or report an empty queue."""
        await self.refresh()
        waiting = self.waiting
        if not waiting:
            self._log.info("queue_empty", doctor_id=self.doctor_id)
            return CallNextResult(appointment=None, queue_empty=True, message=QUEUE_EMPTY_MESSAGE)

        appointment = await self.start_consultation(waiting[0].id)
        self._log.info(
            "patient_called",
            doctor_id=self.doctor_id,
            appointment_id=appointment.id,
            patient_name=appointment.patient_name,
        )
        return CallNextResult(appointment=appointment, queue_empty=False)

    async def start_consultation(self, appointment_id: str) -> Appointment:
        """Move an appointment to in-progress and open it.

        Opening an appointment that is already in progress just reopens it.
        """
        target = self._find_cached(appointment_id)
        if target is None:
            target = await self._appointment_repository.find_by_id(appointment_id)
        if target is None:
            raise AppointmentNotFoundError(appointment_id)

        for other in self.in_consultation:
            if other.id != target.id:
                raise ConsultationAlreadyActiveError(self.doctor_id, other.id)

        if target.is_in_progress():
            self.active_appointment = target
            return target

        updated = await self._commit(target.start())
        self.active_appointment = updated
        await self.refresh()
        return updated

    async def complete_consultation(self, notes: Optional[str] = None) -> Appointment:
        """Complete the open appointment, storing ``notes`` verbatim."""
        if self.active_appointment is None:
            raise NoActiveConsultationError(self.doctor_id)

        updated = await self._commit(self.active_appointment.complete(notes))
        self.active_appointment = None
        await self.refresh()
        self._log.info(
            "consultation_completed", doctor_id=self.doctor_id, appointment_id=updated.id
        )
        return updated

    def open_record(self, appointment_id: str) -> Appointment:
        """Open any cached appointment for viewing without changing its status."""
        record = self._find_cached(appointment_id)
        if record is None:
            raise AppointmentNotFoundError(appointment_id)
        self.active_appointment = record
        return record

    def close_consultation(self) -> None:
        """Close the open appointment view; its status is unchanged."""
        self.active_appointment = None

    async def add_patient(self, name: str, symptoms: Optional[str] = None) -> Optional[Appointment]:
        """Add a walk-in patient straight to the waiting queue."""
        appointment = await self._add_walk_in_patient.execute(
            AddWalkInPatientRequest(name=name, symptoms=symptoms)
        )
        if appointment is None:
            return None
        await self.refresh()
        self._log.info(
            "walk_in_added", doctor_id=self.doctor_id, appointment_id=appointment.id
        )
        return appointment

    async def _commit(self, appointment: Appointment) -> Appointment:
        try:
            updated = await self._appointment_repository.update(appointment)
        except AppointmentConflictError as e:
            self._log.warning("conflict_detected", doctor_id=self.doctor_id, **e.details)
            await self.refresh()
            raise
        if updated is None:
            raise AppointmentNotFoundError(appointment.id)
        return updated
