"""Book appointment use case: derive a booking from a triage session and store it."""

import logging
from typing import Optional

from ..ports.repositories.appointment_repo import AppointmentRepository
from ..utils.booking_derivation import derive_booking
from ...domain.entities.appointment import Appointment
from ...domain.entities.session import Session
from ...domain.entities.user import User
from ...domain.value_objects.idempotency_key import IdempotencyKey
from ...domain.value_objects.patient_id import PatientId

logger = logging.getLogger("healthvoice.booking")


class BookAppointmentRequest:
    """Request for booking from a session."""
    def __init__(self, session: Session, user: User):
        self.session = session
        self.user = user


class BookAppointmentUseCase:
    """Use case for turning a triage conversation into a scheduled appointment."""

    def __init__(self, appointment_repository: AppointmentRepository, idempotent: bool = True):
        self._appointment_repository = appointment_repository
        self._idempotent = idempotent

    async def execute(self, request: BookAppointmentRequest) -> Appointment:
        booking = derive_booking(request.session, fallback_name=request.user.name)

        idempotency_key: Optional[str] = None
        if self._idempotent:
            idempotency_key = IdempotencyKey.for_session(request.session.session_id).value

        appointment = await self._appointment_repository.create(
            patient_id=PatientId.for_account(request.user.user_id).value,
            patient_name=booking.patient_name,
            symptoms_summary=booking.symptoms_summary,
            idempotency_key=idempotency_key,
        )
        logger.info(
            "Booked appointment %s from session %s", appointment.id, request.session.session_id
        )
        return appointment
