"""
In-memory appointment store tests: creation defaults, optimistic
versioning, transition rules, idempotent create and events.
"""

from dataclasses import replace

import pytest

from conftest import make_appointment
from healthvoice.adapters.db.memory import InMemoryAppointmentRepository
from healthvoice.core.event_bus import AppointmentEventBus
from healthvoice.core.utils.datetime_utils import today_iso
from healthvoice.domain.enums.triage import AppointmentStatus
from healthvoice.domain.errors import (
    AppointmentConflictError,
    ImmutableFieldError,
    InvalidStatusTransitionError,
)
from healthvoice.domain.events import AppointmentCreated, AppointmentUpdated


@pytest.mark.asyncio
async def test_create_assigns_defaults():
    repository = InMemoryAppointmentRepository(default_doctor_id="d7")

    appointment = await repository.create("u1", "Sarah", "headache, fever")

    assert appointment.id.startswith("appt-")
    assert appointment.date == today_iso()
    assert appointment.time_slot[-2:] in ("AM", "PM")
    assert appointment.status == AppointmentStatus.SCHEDULED
    assert appointment.doctor_id == "d7"
    assert appointment.version == 1
    assert appointment.notes is None


@pytest.mark.asyncio
async def test_update_bumps_version_and_rejects_stale_copies():
    repository = InMemoryAppointmentRepository()
    created = await repository.create("u1", "Sarah", "headache")

    started = await repository.update(created.start())
    assert started.version == 2
    assert started.status == AppointmentStatus.IN_PROGRESS

    with pytest.raises(AppointmentConflictError) as exc_info:
        await repository.update(created.start())
    assert exc_info.value.details["actual_version"] == 2


@pytest.mark.asyncio
async def test_update_rejects_backward_transition():
    repository = InMemoryAppointmentRepository()
    created = await repository.create("u1", "Sarah", "headache")
    completed = await repository.update((await repository.update(created.start())).complete("ok"))

    with pytest.raises(InvalidStatusTransitionError):
        await repository.update(replace(completed, status=AppointmentStatus.SCHEDULED))
    with pytest.raises(InvalidStatusTransitionError):
        completed.with_status(AppointmentStatus.IN_PROGRESS)


@pytest.mark.asyncio
async def test_update_allows_notes_without_status_change():
    repository = InMemoryAppointmentRepository()
    created = await repository.create("u1", "Sarah", "headache")

    annotated = await repository.update(created.with_notes("called twice, no answer"))

    assert annotated.status == AppointmentStatus.SCHEDULED
    assert annotated.notes == "called twice, no answer"


@pytest.mark.asyncio
async def test_update_rejects_immutable_field_changes():
    repository = InMemoryAppointmentRepository()
    created = await repository.create("u1", "Sarah", "headache")

    with pytest.raises(ImmutableFieldError):
        await repository.update(replace(created, patient_name="Someone Else"))
    with pytest.raises(ImmutableFieldError):
        await repository.update(replace(created, time_slot="01:00 AM"))
    with pytest.raises(ImmutableFieldError):
        await repository.update(replace(created, symptoms_summary="rewritten"))
    with pytest.raises(ImmutableFieldError) as exc_info:
        await repository.update(replace(created.start(), doctor_id="d9"))
    assert exc_info.value.details["field"] == "doctor_id"

    stored = await repository.find_by_id(created.id)
    assert stored.symptoms_summary == "headache"
    assert stored.doctor_id == "d1"
    assert stored.version == 1


@pytest.mark.asyncio
async def test_update_of_unknown_id_is_a_no_op():
    repository = InMemoryAppointmentRepository()

    assert await repository.update(make_appointment("appt-ghost")) is None
    assert await repository.find_all() == []


@pytest.mark.asyncio
async def test_idempotent_create_returns_existing_record():
    repository = InMemoryAppointmentRepository()

    first = await repository.create("u1", "Sarah", "headache", idempotency_key="session:abc")
    second = await repository.create("u1", "Sarah", "headache", idempotency_key="session:abc")
    third = await repository.create("u1", "Sarah", "headache", idempotency_key="session:xyz")

    assert first.id == second.id
    assert third.id != first.id
    assert len(await repository.find_all()) == 2


@pytest.mark.asyncio
async def test_callers_receive_copies():
    repository = InMemoryAppointmentRepository()
    created = await repository.create("u1", "Sarah", "headache")

    created.notes = "scribbled on a copy"

    assert (await repository.find_by_id(created.id)).notes is None


@pytest.mark.asyncio
async def test_mutations_publish_events():
    bus = AppointmentEventBus()
    received = []
    bus.subscribe(received.append)
    repository = InMemoryAppointmentRepository(event_bus=bus)

    created = await repository.create("u1", "Sarah", "headache")
    await repository.update(created.start())

    assert [type(e) for e in received] == [AppointmentCreated, AppointmentUpdated]
    assert received[1].appointment.version == 2


@pytest.mark.asyncio
async def test_doctor_list_puts_in_progress_first():
    repository = InMemoryAppointmentRepository()
    await repository.seed(
        [
            make_appointment("appt-b", time_slot="08:00"),
            make_appointment("appt-a", time_slot="09:00", status=AppointmentStatus.IN_PROGRESS),
        ]
    )

    ordered = await repository.get_doctor_appointments("d1")

    assert [a.id for a in ordered] == ["appt-a", "appt-b"]


@pytest.mark.asyncio
async def test_doctor_filter_is_opt_in():
    rows = [
        make_appointment("appt-1", doctor_id="d1"),
        make_appointment("appt-2", doctor_id="d2"),
    ]
    unfiltered = InMemoryAppointmentRepository()
    filtered = InMemoryAppointmentRepository(filter_by_doctor=True)
    await unfiltered.seed(rows)
    await filtered.seed(rows)

    assert len(await unfiltered.get_doctor_appointments("d2")) == 2
    assert [a.id for a in await filtered.get_doctor_appointments("d2")] == ["appt-2"]


@pytest.mark.asyncio
async def test_seed_skips_existing_records():
    repository = InMemoryAppointmentRepository()

    assert await repository.seed([make_appointment("appt-1")]) == 1
    assert await repository.seed([make_appointment("appt-1"), make_appointment("appt-2")]) == 1
