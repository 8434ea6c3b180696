"""Events published after every appointment store mutation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..entities.appointment import Appointment


@dataclass(frozen=True)
class AppointmentEvent:
    """Base appointment event carrying the record as stored."""

    appointment: Appointment
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def doctor_id(self):
        return self.appointment.doctor_id


@dataclass(frozen=True)
class AppointmentCreated(AppointmentEvent):
    """A new appointment entered the queue."""


@dataclass(frozen=True)
class AppointmentUpdated(AppointmentEvent):
    """An appointment changed status or notes."""
