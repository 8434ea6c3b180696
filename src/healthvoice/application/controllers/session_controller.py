"""
Session controller: one patient's triage interaction.

Owns the session, forwards each patient turn to the inference service,
records both sides of the exchange in the conversation log and books
the appointment at the end.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from ..dto.triage_dto import SubmissionResult
from ..ports.services.inference_service import (
    AudioInput,
    InferenceRequest,
    InferenceResult,
    InferenceService,
)
from ..ports.services.speech_output_service import SpeechOutputService
from ..use_cases.book_appointment import BookAppointmentRequest, BookAppointmentUseCase
from ...core.constants import AUDIO_PLACEHOLDER_TEXT, INFERENCE_FAILURE_TEXT
from ...core.structured_logger import get_logger
from ...domain.entities.appointment import Appointment
from ...domain.entities.session import Session
from ...domain.entities.user import User
from ...domain.enums.triage import BookingStatus, Language, Sender
from ...domain.errors import SubmissionInProgressError


@dataclass
class PendingSubmission:
    """Token for the turn currently awaiting its inference result.

    ``future`` resolves to the ``InferenceResult``, or ``None`` when the
    call failed.
    """

    message_id: str
    future: "asyncio.Future[Optional[InferenceResult]]"


class SessionController:
    """Coordinates a single patient's session.

    Submissions are serialized: a second ``submit_input`` while one is
    outstanding raises ``SubmissionInProgressError``.
    """

    def __init__(
        self,
        inference_service: InferenceService,
        speech_service: SpeechOutputService,
        book_appointment: BookAppointmentUseCase,
        user: Optional[User] = None,
        default_language: Language = Language.ENGLISH,
    ) -> None:
        self._inference_service = inference_service
        self._speech_service = speech_service
        self._book_appointment = book_appointment
        self._default_language = Language(default_language)
        self._log = get_logger("healthvoice.session")

        self.user = user
        self.session: Optional[Session] = None
        self.is_processing = False
        self.booking_status = BookingStatus.IDLE
        self.pending: Optional[PendingSubmission] = None
        self.booked_appointment: Optional[Appointment] = None

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_session(self, language: Optional[Language] = None) -> Session:
        language = Language(language or self._default_language)
        user_id = self.user.user_id if self.user else "guest"
        self.session = Session.start(user_id, language)
        self.booking_status = BookingStatus.IDLE
        self.booked_appointment = None
        self._log.info(
            "session_started",
            session_id=self.session.session_id,
            user_id=user_id,
            language=language.value,
        )
        return self.session

    def end_session(self) -> None:
        """Drop the session; a turn still in flight is discarded when it returns."""
        if self.session is not None:
            self._log.info("session_ended", session_id=self.session.session_id)
        self.session = None
        self.booking_status = BookingStatus.IDLE
        self.booked_appointment = None

    # ------------------------------------------------------------------
    # Patient turns
    # ------------------------------------------------------------------

    async def submit_input(
        self, audio: Optional[AudioInput] = None, text: Optional[str] = None
    ) -> Optional[SubmissionResult]:
        """Process one patient turn.

        Returns ``None`` when there is nothing to do (no session, or neither
        audio nor text). A failed inference call still yields a result: the
        bot side carries the fixed apology text.
        """
        session = self.session
        if session is None:
            self._log.debug("input_ignored", reason="no_active_session")
            return None
        if audio is None and not text:
            self._log.debug("input_ignored", reason="empty_input", session_id=session.session_id)
            return None
        if self.pending is not None:
            raise SubmissionInProgressError(session.session_id, self.pending.message_id)

        prior_messages = session.snapshot_messages()
        user_message = session.append_message(Sender.USER, text or AUDIO_PLACEHOLDER_TEXT)
        pending = PendingSubmission(
            message_id=user_message.message_id,
            future=asyncio.get_running_loop().create_future(),
        )
        self.pending = pending
        self.is_processing = True
        self._log.info(
            "input_submitted",
            session_id=session.session_id,
            message_id=pending.message_id,
            has_audio=audio is not None,
        )

        try:
            try:
                result = await self._inference_service.infer(
                    InferenceRequest(
                        language=session.language,
                        prior_messages=prior_messages,
                        audio=audio,
                        text=text,
                    )
                )
            except Exception as e:
                self._log.error(
                    "inference_failed",
                    session_id=session.session_id,
                    message_id=pending.message_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                pending.future.set_result(None)
                if self.session is not session:
                    self._log.info("result_discarded", session_id=session.session_id)
                    return None
                bot_message = session.append_message(Sender.BOT, INFERENCE_FAILURE_TEXT)
                return SubmissionResult(user_message, bot_message, succeeded=False)

            pending.future.set_result(result)
            if self.session is not session:
                self._log.info("result_discarded", session_id=session.session_id)
                return None

            if audio is not None and result.transcription:
                session.revise_user_text(pending.message_id, result.transcription)
            bot_message = session.append_message(
                Sender.BOT, result.response_text, metadata=result.to_metadata()
            )
            await self._speak(result.response_text, session.language)
            return SubmissionResult(user_message, bot_message, succeeded=True)
        finally:
            if not pending.future.done():
                pending.future.cancel()
            self.pending = None
            self.is_processing = False

    async def _speak(self, text: str, language: Language) -> None:
        try:
            await self._speech_service.speak(text, language)
        except Exception as e:
            self._log.warning("speech_output_failed", error=str(e))

    # ------------------------------------------------------------------
    # Booking
    # ------------------------------------------------------------------

    async def book_appointment(self) -> Optional[Appointment]:
        """Book from the current session; a no-op without a session or user."""
        if self.session is None or self.user is None:
            self._log.debug("booking_ignored", reason="no_session_or_user")
            return None

        self.booking_status = BookingStatus.BOOKING
        try:
            appointment = await self._book_appointment.execute(
                BookAppointmentRequest(session=self.session, user=self.user)
            )
        except Exception:
            self.booking_status = BookingStatus.IDLE
            raise

        self.booking_status = BookingStatus.BOOKED
        self.booked_appointment = appointment
        self._log.info(
            "booking_created",
            session_id=self.session.session_id,
            appointment_id=appointment.id,
            patient_name=appointment.patient_name,
        )
        return appointment
