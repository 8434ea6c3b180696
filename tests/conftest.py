"""
Shared fixtures and fakes for the HealthVoice test suite.
"""

import asyncio
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from healthvoice.adapters.db.memory import InMemoryAppointmentRepository
from healthvoice.app import create_app
from healthvoice.application.controllers.session_controller import SessionController
from healthvoice.application.ports.services.inference_service import (
    InferenceRequest,
    InferenceResult,
    InferenceService,
)
from healthvoice.application.ports.services.speech_output_service import SpeechOutputService
from healthvoice.application.use_cases.book_appointment import BookAppointmentUseCase
from healthvoice.core.config import (
    LoggingSettings,
    SecuritySettings,
    SessionSettings,
    Settings,
)
from healthvoice.core.container import ServiceNames, build_container
from healthvoice.domain.entities.appointment import Appointment
from healthvoice.domain.entities.user import User
from healthvoice.domain.enums.triage import AppointmentStatus, Language
from healthvoice.domain.value_objects.appointment_id import AppointmentId


# -----------------------------------------------------------------------------
# Fakes
# -----------------------------------------------------------------------------


def reply(
    text: str = "Thank you. Can you tell me more?",
    symptoms: Optional[List[str]] = None,
    patient_name: Optional[str] = None,
    transcription: str = "",
    diagnosis: str = "Pending",
    confidence: float = 40.0,
) -> InferenceResult:
    return InferenceResult(
        transcription=transcription,
        response_text=text,
        symptoms=list(symptoms or []),
        diagnosis=diagnosis,
        confidence=confidence,
        recommended_action="Rest and stay hydrated",
        detected_language="en",
        patient_name=patient_name,
    )


class ScriptedInferenceService(InferenceService):
    """Plays back queued results; a queued exception is raised instead."""

    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.requests: List[InferenceRequest] = []

    def queue(self, *outcomes) -> None:
        self.outcomes.extend(outcomes)

    async def infer(self, request: InferenceRequest) -> InferenceResult:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if self.outcomes else reply()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class BlockingInferenceService(InferenceService):
    """Holds every call until ``release`` is set.

    ``result`` may be an exception, raised once released.
    """

    def __init__(self, result) -> None:
        self.result = result
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def infer(self, request: InferenceRequest) -> InferenceResult:
        self.started.set()
        await self.release.wait()
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class RecordingSpeechService(SpeechOutputService):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.spoken = []

    async def speak(self, text: str, language: Language) -> None:
        if self.fail:
            raise RuntimeError("speaker unavailable")
        self.spoken.append((text, language))


# -----------------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------------


def make_settings(seed_demo_data: bool = False, **overrides) -> Settings:
    return Settings(
        app_env="testing",
        logging=LoggingSettings(level="WARNING", format="text"),
        security=SecuritySettings(bcrypt_rounds=4),
        session=SessionSettings(seed_demo_data=seed_demo_data),
        **overrides,
    )


def make_user(user_id: str = "u1", name: str = "John Doe") -> User:
    return User(user_id=user_id, name=name, email=f"{user_id}@example.com")


def make_appointment(
    appointment_id: str,
    time_slot: str = "09:00 AM",
    status: AppointmentStatus = AppointmentStatus.SCHEDULED,
    patient_name: str = "Alice Johnson",
    symptoms_summary: str = "Headache",
    doctor_id: str = "d1",
    notes: Optional[str] = None,
) -> Appointment:
    return Appointment(
        appointment_id=AppointmentId(appointment_id),
        patient_id=f"p-{appointment_id}",
        patient_name=patient_name,
        date="2026-01-05",
        time_slot=time_slot,
        symptoms_summary=symptoms_summary,
        doctor_id=doctor_id,
        status=status,
        notes=notes,
    )


def make_session_controller(
    inference: InferenceService,
    speech: Optional[SpeechOutputService] = None,
    user: Optional[User] = None,
    repository: Optional[InMemoryAppointmentRepository] = None,
    idempotent: bool = True,
) -> SessionController:
    repository = repository or InMemoryAppointmentRepository()
    return SessionController(
        inference_service=inference,
        speech_service=speech or RecordingSpeechService(),
        book_appointment=BookAppointmentUseCase(repository, idempotent=idempotent),
        user=user,
    )


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def inference():
    return ScriptedInferenceService()


@pytest.fixture
def speech():
    return RecordingSpeechService()


@pytest.fixture
def client(inference, speech):
    """Test client over a fresh app with demo data and fake AI services."""
    container = build_container(make_settings(seed_demo_data=True))
    container.register_singleton(ServiceNames.INFERENCE_SERVICE, inference)
    container.register_singleton(ServiceNames.SPEECH_SERVICE, speech)
    with TestClient(create_app(container=container)) as test_client:
        yield test_client
