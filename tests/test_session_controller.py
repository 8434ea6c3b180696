"""
Session controller tests: conversation log growth, name accrual,
serialized submissions and booking.
"""

import asyncio

import pytest

from conftest import (
    BlockingInferenceService,
    RecordingSpeechService,
    ScriptedInferenceService,
    make_session_controller,
    make_user,
    reply,
)
from healthvoice.adapters.db.memory import InMemoryAppointmentRepository
from healthvoice.application.ports.services.inference_service import AudioInput
from healthvoice.core.constants import AUDIO_PLACEHOLDER_TEXT, INFERENCE_FAILURE_TEXT
from healthvoice.core.exceptions import InferenceServiceError
from healthvoice.domain.enums.triage import BookingStatus, Language, Sender
from healthvoice.domain.errors import SubmissionInProgressError


def test_start_session_seeds_greeting():
    controller = make_session_controller(ScriptedInferenceService())
    session = controller.start_session(Language.TAMIL)

    assert session.language == Language.TAMIL
    assert len(session.messages) == 1
    greeting = session.messages[0]
    assert greeting.message_id == "init"
    assert greeting.sender == Sender.BOT
    assert greeting.metadata is None
    assert session.user_id == "guest"
    assert controller.booking_status == BookingStatus.IDLE


@pytest.mark.asyncio
async def test_successful_turn_appends_user_and_bot_messages():
    inference = ScriptedInferenceService(
        reply("Sorry to hear that, Sarah.", symptoms=["headache", "fever"], patient_name="Sarah")
    )
    speech = RecordingSpeechService()
    controller = make_session_controller(inference, speech=speech)
    session = controller.start_session()

    result = await controller.submit_input(text="My name is Sarah, I have a headache and fever")

    assert result.succeeded
    assert len(session.messages) == 3
    assert result.user_message.text == "My name is Sarah, I have a headache and fever"
    assert result.bot_message.metadata.symptoms_extracted == ["headache", "fever"]
    assert session.extracted_patient_name == "Sarah"
    assert speech.spoken == [("Sorry to hear that, Sarah.", Language.ENGLISH)]
    assert controller.is_processing is False
    assert controller.pending is None


@pytest.mark.asyncio
async def test_failed_turn_appends_apology_and_session_stays_usable():
    inference = ScriptedInferenceService(InferenceServiceError("boom"), reply("Go on."))
    controller = make_session_controller(inference)
    session = controller.start_session()

    failed = await controller.submit_input(text="I feel dizzy")
    assert failed.succeeded is False
    assert failed.bot_message.text == INFERENCE_FAILURE_TEXT
    assert failed.bot_message.metadata is None
    assert len(session.messages) == 3
    assert controller.is_processing is False

    retried = await controller.submit_input(text="I feel dizzy")
    assert retried.succeeded
    assert len(session.messages) == 5


@pytest.mark.asyncio
async def test_log_stays_timestamp_ordered_over_many_turns():
    inference = ScriptedInferenceService(
        reply(), InferenceServiceError("down"), reply(), reply()
    )
    controller = make_session_controller(inference)
    session = controller.start_session()

    for text in ["one", "two", "three", "four"]:
        await controller.submit_input(text=text)

    assert len(session.messages) == 1 + 4 * 2
    timestamps = [m.timestamp for m in session.messages]
    assert timestamps == sorted(timestamps)
    assert [m.sender for m in session.messages[1:]] == [Sender.USER, Sender.BOT] * 4


@pytest.mark.asyncio
async def test_patient_name_is_never_cleared_by_a_later_turn():
    inference = ScriptedInferenceService(
        reply(patient_name="Sarah"),
        reply(patient_name=None),
        reply(patient_name="  "),
        reply(patient_name="Sarah Lee"),
    )
    controller = make_session_controller(inference)
    session = controller.start_session()

    await controller.submit_input(text="Sarah")
    assert session.extracted_patient_name == "Sarah"
    await controller.submit_input(text="I have a cough")
    await controller.submit_input(text="since Monday")
    assert session.extracted_patient_name == "Sarah"
    await controller.submit_input(text="Actually, Sarah Lee")
    assert session.extracted_patient_name == "Sarah Lee"


@pytest.mark.asyncio
async def test_empty_input_and_missing_session_are_ignored():
    inference = ScriptedInferenceService()
    controller = make_session_controller(inference)

    assert await controller.submit_input(text="hello") is None

    session = controller.start_session()
    assert await controller.submit_input() is None
    assert await controller.submit_input(text="") is None
    assert len(session.messages) == 1
    assert inference.requests == []


@pytest.mark.asyncio
async def test_prior_messages_exclude_the_new_turn():
    inference = ScriptedInferenceService(reply(), reply())
    controller = make_session_controller(inference)
    controller.start_session()

    await controller.submit_input(text="first")
    await controller.submit_input(text="second")

    first, second = inference.requests
    assert [m.message_id for m in first.prior_messages] == ["init"]
    assert [m.text for m in second.prior_messages][1:] == ["first", "Thank you. Can you tell me more?"]
    assert second.text == "second"


@pytest.mark.asyncio
async def test_audio_turn_revises_placeholder_with_transcription():
    inference = ScriptedInferenceService(reply(transcription="I have a sore throat"), reply())
    controller = make_session_controller(inference)
    session = controller.start_session()

    result = await controller.submit_input(audio=AudioInput(content=b"\x00\x01"))
    assert result.user_message.text == "I have a sore throat"
    assert session.messages[1].text == "I have a sore throat"

    result = await controller.submit_input(audio=AudioInput(content=b"\x00\x02"))
    assert result.user_message.text == AUDIO_PLACEHOLDER_TEXT


@pytest.mark.asyncio
async def test_second_submission_while_pending_is_rejected():
    inference = BlockingInferenceService(reply("Noted."))
    controller = make_session_controller(inference)
    session = controller.start_session()

    first = asyncio.create_task(controller.submit_input(text="I have a rash"))
    await inference.started.wait()

    assert controller.is_processing is True
    assert controller.pending.message_id == session.messages[-1].message_id
    with pytest.raises(SubmissionInProgressError):
        await controller.submit_input(text="and itching")
    assert len(session.messages) == 2

    inference.release.set()
    result = await first
    assert result.succeeded
    assert len(session.messages) == 3
    assert controller.pending is None
    assert controller.is_processing is False


@pytest.mark.asyncio
async def test_result_is_discarded_when_session_ends_mid_flight():
    inference = BlockingInferenceService(reply("Noted."))
    controller = make_session_controller(inference)
    session = controller.start_session()

    task = asyncio.create_task(controller.submit_input(text="hello there"))
    await inference.started.wait()
    controller.end_session()
    inference.release.set()

    assert await task is None
    assert len(session.messages) == 2
    assert controller.is_processing is False


@pytest.mark.asyncio
async def test_failed_result_is_discarded_when_session_ends_mid_flight():
    inference = BlockingInferenceService(InferenceServiceError("timeout"))
    controller = make_session_controller(inference)
    session = controller.start_session()

    task = asyncio.create_task(controller.submit_input(text="hello there"))
    await inference.started.wait()
    controller.end_session()
    inference.release.set()

    assert await task is None
    assert controller.session is None
    assert [m.sender for m in session.messages] == [Sender.BOT, Sender.USER]
    assert controller.is_processing is False
    assert controller.pending is None


@pytest.mark.asyncio
async def test_speech_failure_does_not_fail_the_turn():
    controller = make_session_controller(
        ScriptedInferenceService(reply()), speech=RecordingSpeechService(fail=True)
    )
    controller.start_session()

    result = await controller.submit_input(text="hello there")
    assert result.succeeded


@pytest.mark.asyncio
async def test_booking_without_user_is_a_no_op():
    controller = make_session_controller(ScriptedInferenceService())
    assert await controller.book_appointment() is None

    controller.start_session()
    assert await controller.book_appointment() is None
    assert controller.booking_status == BookingStatus.IDLE


@pytest.mark.asyncio
async def test_booking_uses_extracted_name_and_symptoms():
    inference = ScriptedInferenceService(
        reply(symptoms=["headache", "fever"], patient_name="Sarah")
    )
    repository = InMemoryAppointmentRepository()
    controller = make_session_controller(inference, user=make_user(), repository=repository)
    controller.start_session()
    await controller.submit_input(text="My name is Sarah, I have a headache and fever")

    appointment = await controller.book_appointment()

    assert appointment.patient_name == "Sarah"
    assert appointment.symptoms_summary == "headache, fever"
    assert appointment.patient_id == "u1"
    assert controller.booking_status == BookingStatus.BOOKED
    assert controller.booked_appointment.id == appointment.id


@pytest.mark.asyncio
async def test_repeat_booking_returns_same_appointment_when_idempotent():
    repository = InMemoryAppointmentRepository()
    controller = make_session_controller(
        ScriptedInferenceService(), user=make_user(), repository=repository
    )
    controller.start_session()

    first = await controller.book_appointment()
    second = await controller.book_appointment()

    assert first.id == second.id
    assert len(await repository.find_all()) == 1


@pytest.mark.asyncio
async def test_repeat_booking_creates_two_records_without_idempotency():
    repository = InMemoryAppointmentRepository()
    controller = make_session_controller(
        ScriptedInferenceService(), user=make_user(), repository=repository, idempotent=False
    )
    controller.start_session()

    first = await controller.book_appointment()
    second = await controller.book_appointment()

    assert first.id != second.id
    assert first.patient_name == second.patient_name == "John Doe"
    assert first.symptoms_summary == second.symptoms_summary


class _BrokenRepository(InMemoryAppointmentRepository):
    async def create(self, *args, **kwargs):
        raise RuntimeError("store offline")


@pytest.mark.asyncio
async def test_failed_booking_resets_status():
    controller = make_session_controller(
        ScriptedInferenceService(), user=make_user(), repository=_BrokenRepository()
    )
    controller.start_session()

    with pytest.raises(RuntimeError):
        await controller.book_appointment()
    assert controller.booking_status == BookingStatus.IDLE
    assert controller.booked_appointment is None
