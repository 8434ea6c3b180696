"""
Registries holding the live controllers of one application instance.

Session controllers are keyed by session id, doctor controllers by
doctor id. Both are built from the services in the container.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from ..use_cases.add_walk_in_patient import AddWalkInPatientUseCase
from ..use_cases.book_appointment import BookAppointmentUseCase
from .doctor_controller import DoctorController
from .session_controller import SessionController
from ...core.container import Container, ServiceNames
from ...domain.entities.user import User
from ...domain.enums.triage import Language
from ...domain.errors import SessionNotActiveError

logger = logging.getLogger("healthvoice.registry")


class SessionRegistry:
    """Open patient sessions.

    Sessions untouched for longer than the configured idle timeout are
    evicted whenever a new one is opened.
    """

    def __init__(self, container: Container) -> None:
        self._container = container
        self._controllers: Dict[str, SessionController] = {}

    def open(self, user: Optional[User], language: Optional[Language] = None) -> SessionController:
        settings = self._container.settings
        self.evict_idle()
        controller = SessionController(
            inference_service=self._container.get(ServiceNames.INFERENCE_SERVICE),
            speech_service=self._container.get(ServiceNames.SPEECH_SERVICE),
            book_appointment=BookAppointmentUseCase(
                self._container.get(ServiceNames.APPOINTMENT_REPOSITORY),
                idempotent=settings.booking.idempotent,
            ),
            user=user,
            default_language=Language(settings.session.default_language),
        )
        session = controller.start_session(language)
        self._controllers[session.session_id] = controller
        return controller

    def get(self, session_id: str) -> SessionController:
        controller = self._controllers.get(session_id)
        if controller is None or controller.session is None:
            raise SessionNotActiveError(session_id)
        return controller

    def close(self, session_id: str) -> None:
        controller = self.get(session_id)
        controller.end_session()
        del self._controllers[session_id]

    def evict_idle(self, now: Optional[datetime] = None) -> int:
        """End and drop idle sessions; a session with a turn in flight is kept."""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(seconds=self._container.settings.session.idle_timeout_seconds)
        stale = [
            session_id
            for session_id, controller in self._controllers.items()
            if not controller.is_processing
            and (controller.session is None or controller.session.last_active_at < cutoff)
        ]
        for session_id in stale:
            self._controllers.pop(session_id).end_session()
        if stale:
            logger.info("Evicted %d idle session(s)", len(stale))
        return len(stale)

    def __len__(self) -> int:
        return len(self._controllers)


class DoctorRegistry:
    """One dashboard controller per doctor, started on first use."""

    def __init__(self, container: Container) -> None:
        self._container = container
        self._controllers: Dict[str, DoctorController] = {}

    async def get(self, doctor_id: str) -> DoctorController:
        controller = self._controllers.get(doctor_id)
        if controller is not None:
            return controller

        settings = self._container.settings
        appointments = self._container.get(ServiceNames.APPOINTMENT_REPOSITORY)
        controller = DoctorController(
            doctor_id=doctor_id,
            appointment_repository=appointments,
            add_walk_in_patient=AddWalkInPatientUseCase(appointments),
            event_bus=self._container.get(ServiceNames.EVENT_BUS),
            poll_interval_seconds=settings.queue.poll_interval_seconds,
            filter_by_doctor=settings.queue.filter_by_doctor,
        )
        await controller.start()
        self._controllers[doctor_id] = controller
        return controller

    async def stop_all(self) -> None:
        for controller in self._controllers.values():
            await controller.stop()
        self._controllers.clear()
        logger.info("Doctor views stopped")
