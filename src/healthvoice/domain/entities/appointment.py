"""Appointment domain entity representing one clinic visit in the queue."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

from ..enums.triage import AppointmentStatus
from ..errors import (
    ImmutableFieldError,
    InvalidAppointmentDataError,
    InvalidStatusTransitionError,
)
from ..value_objects.appointment_id import AppointmentId

# Fields fixed at creation; only status and notes move afterwards.
IMMUTABLE_FIELDS = (
    "appointment_id",
    "patient_id",
    "patient_name",
    "date",
    "time_slot",
    "symptoms_summary",
    "doctor_id",
)

def can_transition(current: AppointmentStatus, requested: AppointmentStatus) -> bool:
    """Whether ``current -> requested`` is a legal status change.

    Only a single step forward is legal. Staying in the same status is
    allowed so notes can be attached.
    """
    return requested == current or requested.rank == current.rank + 1


@dataclass
class Appointment:
    """Appointment domain entity."""

    appointment_id: AppointmentId
    patient_id: str
    patient_name: str
    date: str       # ISO date, YYYY-MM-DD
    time_slot: str  # e.g. "09:00 AM"
    symptoms_summary: str
    doctor_id: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None
    version: int = 1
    idempotency_key: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate appointment data."""
        self.status = AppointmentStatus(self.status)
        if not self.patient_id:
            raise InvalidAppointmentDataError("patient_id", self.patient_id)
        if not self.patient_name or not self.patient_name.strip():
            raise InvalidAppointmentDataError("patient_name", self.patient_name)
        if not self.time_slot:
            raise InvalidAppointmentDataError("time_slot", self.time_slot)
        if self.version < 1:
            raise InvalidAppointmentDataError("version", self.version)

    @property
    def id(self) -> str:
        return self.appointment_id.value

    # ------------------------------------------------------------------
    # Copy-on-write mutations; the store persists the returned copy
    # ------------------------------------------------------------------

    def with_status(self, status: AppointmentStatus) -> "Appointment":
        """Copy of this appointment moved to ``status``."""
        status = AppointmentStatus(status)
        if not can_transition(self.status, status):
            raise InvalidStatusTransitionError(self.id, self.status.value, status.value)
        return replace(self, status=status)

    def with_notes(self, notes: Optional[str]) -> "Appointment":
        """Copy of this appointment carrying ``notes`` verbatim."""
        return replace(self, notes=notes)

    def start(self) -> "Appointment":
        return self.with_status(AppointmentStatus.IN_PROGRESS)

    def complete(self, notes: Optional[str]) -> "Appointment":
        return self.with_status(AppointmentStatus.COMPLETED).with_notes(notes)

    def check_update(self, updated: "Appointment") -> None:
        """Validate that ``updated`` is a legal successor of this record."""
        for name in IMMUTABLE_FIELDS:
            if getattr(updated, name) != getattr(self, name):
                raise ImmutableFieldError(self.id, name)
        if not can_transition(self.status, updated.status):
            raise InvalidStatusTransitionError(self.id, self.status.value, updated.status.value)

    def is_waiting(self) -> bool:
        return self.status == AppointmentStatus.SCHEDULED

    def is_in_progress(self) -> bool:
        return self.status == AppointmentStatus.IN_PROGRESS

    def is_completed(self) -> bool:
        return self.status == AppointmentStatus.COMPLETED

    def matches(self, term: str) -> bool:
        """Case-insensitive search across name, symptoms and notes."""
        needle = (term or "").lower()
        return (
            needle in self.patient_name.lower()
            or needle in self.symptoms_summary.lower()
            or needle in (self.notes or "").lower()
        )
