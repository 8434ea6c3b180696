"""
Doctor controller tests: calling patients, consultations, walk-ins,
records search and cache updates from store events.
"""

import pytest

from conftest import make_appointment
from healthvoice.adapters.db.memory import InMemoryAppointmentRepository
from healthvoice.application.controllers.doctor_controller import DoctorController
from healthvoice.application.use_cases.add_walk_in_patient import AddWalkInPatientUseCase
from healthvoice.core.constants import QUEUE_EMPTY_MESSAGE, WALK_IN_SYMPTOMS
from healthvoice.core.event_bus import AppointmentEventBus
from healthvoice.domain.enums.triage import AppointmentStatus
from healthvoice.domain.errors import (
    AppointmentConflictError,
    AppointmentNotFoundError,
    ConsultationAlreadyActiveError,
    NoActiveConsultationError,
)
from healthvoice.domain.events import AppointmentUpdated


def _controller(repository, event_bus=None) -> DoctorController:
    return DoctorController(
        doctor_id="d1",
        appointment_repository=repository,
        add_walk_in_patient=AddWalkInPatientUseCase(repository),
        event_bus=event_bus,
        poll_interval_seconds=60,
    )


async def _seeded(*appointments):
    repository = InMemoryAppointmentRepository()
    await repository.seed(list(appointments))
    controller = _controller(repository)
    await controller.refresh()
    return repository, controller


@pytest.mark.asyncio
async def test_call_next_on_empty_queue_changes_nothing():
    repository, controller = await _seeded(
        make_appointment("appt-1", status=AppointmentStatus.COMPLETED, notes="done")
    )
    before = await repository.find_all()

    result = await controller.call_next_patient()

    assert result.queue_empty is True
    assert result.appointment is None
    assert result.message == QUEUE_EMPTY_MESSAGE
    assert controller.active_appointment is None
    after = await repository.find_all()
    assert [(a.status, a.version) for a in after] == [(a.status, a.version) for a in before]


@pytest.mark.asyncio
async def test_call_next_starts_first_waiting_by_time_slot():
    repository, controller = await _seeded(
        make_appointment("appt-late", time_slot="11:30 AM", patient_name="Late"),
        make_appointment("appt-early", time_slot="09:00 AM", patient_name="Early"),
    )

    result = await controller.call_next_patient()

    assert result.appointment.id == "appt-early"
    assert result.appointment.status == AppointmentStatus.IN_PROGRESS
    assert result.appointment.version == 2
    assert controller.active_appointment.id == "appt-early"
    assert [a.id for a in controller.in_consultation] == ["appt-early"]
    assert [a.id for a in controller.waiting] == ["appt-late"]
    stored = await repository.find_by_id("appt-early")
    assert stored.status == AppointmentStatus.IN_PROGRESS


@pytest.mark.asyncio
async def test_only_one_consultation_at_a_time():
    _, controller = await _seeded(
        make_appointment("appt-1", time_slot="09:00 AM"),
        make_appointment("appt-2", time_slot="10:00 AM"),
    )
    await controller.call_next_patient()

    with pytest.raises(ConsultationAlreadyActiveError):
        await controller.call_next_patient()
    with pytest.raises(ConsultationAlreadyActiveError):
        await controller.start_consultation("appt-2")


@pytest.mark.asyncio
async def test_starting_an_in_progress_appointment_reopens_it():
    _, controller = await _seeded(make_appointment("appt-1"))
    started = await controller.start_consultation("appt-1")
    controller.close_consultation()

    reopened = await controller.start_consultation("appt-1")

    assert reopened.version == started.version
    assert controller.active_appointment.id == "appt-1"


@pytest.mark.asyncio
async def test_start_unknown_appointment_raises():
    _, controller = await _seeded()
    with pytest.raises(AppointmentNotFoundError):
        await controller.start_consultation("appt-missing")


@pytest.mark.asyncio
async def test_complete_consultation_stores_notes_verbatim():
    repository, controller = await _seeded(make_appointment("appt-1"))
    await controller.call_next_patient()

    notes = "  Prescribed rest.\nReview in 3 days.  "
    completed = await controller.complete_consultation(notes)

    assert completed.status == AppointmentStatus.COMPLETED
    assert completed.notes == notes
    assert controller.active_appointment is None
    assert [a.id for a in controller.completed] == ["appt-1"]
    assert (await repository.find_by_id("appt-1")).notes == notes


@pytest.mark.asyncio
async def test_complete_without_open_consultation_raises():
    _, controller = await _seeded(make_appointment("appt-1"))
    with pytest.raises(NoActiveConsultationError):
        await controller.complete_consultation("notes")


@pytest.mark.asyncio
async def test_close_consultation_leaves_status_unchanged():
    repository, controller = await _seeded(make_appointment("appt-1"))
    await controller.call_next_patient()

    controller.close_consultation()

    assert controller.active_appointment is None
    assert (await repository.find_by_id("appt-1")).status == AppointmentStatus.IN_PROGRESS


@pytest.mark.asyncio
async def test_open_record_does_not_change_status():
    _, controller = await _seeded(
        make_appointment("appt-2", status=AppointmentStatus.COMPLETED, notes="Antihistamine")
    )

    record = controller.open_record("appt-2")

    assert record.status == AppointmentStatus.COMPLETED
    assert controller.active_appointment.id == "appt-2"
    with pytest.raises(AppointmentNotFoundError):
        controller.open_record("appt-missing")


@pytest.mark.asyncio
async def test_add_patient_requires_a_name():
    repository, controller = await _seeded()

    assert await controller.add_patient("   ") is None
    assert await repository.find_all() == []

    added = await controller.add_patient("Walk In", None)
    assert added.patient_id.startswith("manual-")
    assert added.symptoms_summary == WALK_IN_SYMPTOMS
    assert added.status == AppointmentStatus.SCHEDULED
    assert [a.id for a in controller.waiting] == [added.id]


@pytest.mark.asyncio
async def test_search_records_is_case_insensitive():
    _, controller = await _seeded(
        make_appointment("appt-1", patient_name="Alice Johnson", symptoms_summary="Severe migraine"),
        make_appointment(
            "appt-2",
            patient_name="Bob Williams",
            symptoms_summary="Skin rash",
            status=AppointmentStatus.COMPLETED,
            notes="Prescribed antihistamine",
        ),
    )

    assert [a.id for a in controller.search_records("MIGRAINE")] == ["appt-1"]
    assert [a.id for a in controller.search_records("antihistamine")] == ["appt-2"]
    assert [a.id for a in controller.search_records("bob")] == ["appt-2"]
    assert controller.search_records("nothing like this") == []


@pytest.mark.asyncio
async def test_stale_write_raises_conflict_and_refreshes_cache():
    repository, controller = await _seeded(make_appointment("appt-1"))
    other_writer = await repository.find_by_id("appt-1")
    await repository.update(other_writer.start())

    with pytest.raises(AppointmentConflictError):
        await controller.start_consultation("appt-1")

    cached = controller.in_consultation
    assert [a.id for a in cached] == ["appt-1"]
    assert cached[0].version == 2


@pytest.mark.asyncio
async def test_store_events_update_cache_without_polling():
    bus = AppointmentEventBus()
    repository = InMemoryAppointmentRepository(event_bus=bus)
    controller = _controller(repository, event_bus=bus)
    await controller.start()
    try:
        assert bus.subscriber_count == 1
        created = await repository.create("u9", "Event Patient", "Cough")
        assert [a.id for a in controller.waiting] == [created.id]

        await repository.update(created.start())
        assert [a.id for a in controller.in_consultation] == [created.id]
    finally:
        await controller.stop()
    assert bus.subscriber_count == 0


@pytest.mark.asyncio
async def test_stale_event_is_ignored():
    repository, controller = await _seeded(make_appointment("appt-1"))
    original = controller.appointments[0]
    await controller.start_consultation("appt-1")

    controller.apply_event(AppointmentUpdated(appointment=original))

    assert controller.appointments[0].status == AppointmentStatus.IN_PROGRESS
    assert controller.appointments[0].version == 2
