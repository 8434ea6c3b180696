"""
Queue ordering and partitioning for the doctor's working list.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ...domain.entities.appointment import Appointment


@dataclass
class QueueView:
    """The doctor's list split by status, each part keeping list order."""

    waiting: List[Appointment] = field(default_factory=list)
    in_consultation: List[Appointment] = field(default_factory=list)
    completed: List[Appointment] = field(default_factory=list)


def _sort_key(appointment: Appointment):
    # False sorts before True, so in-progress rows lead
    return (not appointment.is_in_progress(), appointment.time_slot)


def order_doctor_appointments(
    appointments: Iterable[Appointment],
    doctor_id: Optional[str] = None,
    filter_by_doctor: bool = False,
) -> List[Appointment]:
    """In-progress first, then lexicographic by time slot.

    ``sorted`` is stable, so equal time slots keep insertion order. The
    doctor filter applies only when ``filter_by_doctor`` is set.
    """
    rows = list(appointments)
    if filter_by_doctor and doctor_id is not None:
        rows = [a for a in rows if a.doctor_id == doctor_id]
    return sorted(rows, key=_sort_key)


def partition_queue(ordered: Iterable[Appointment]) -> QueueView:
    view = QueueView()
    for appointment in ordered:
        if appointment.is_waiting():
            view.waiting.append(appointment)
        elif appointment.is_in_progress():
            view.in_consultation.append(appointment)
        else:
            view.completed.append(appointment)
    return view
