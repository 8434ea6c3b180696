"""Controller result DTOs."""

from dataclasses import dataclass
from typing import Optional

from ...domain.entities.appointment import Appointment
from ...domain.entities.message import Message


@dataclass
class SubmissionResult:
    """Outcome of one submitted patient turn."""

    user_message: Message
    bot_message: Message
    succeeded: bool


@dataclass
class CallNextResult:
    """Outcome of calling the next patient from the waiting queue."""

    appointment: Optional[Appointment]
    queue_empty: bool
    message: str = ""
