"""
Booking derivation: turn a triage conversation into the patient name and
symptom summary written on the appointment.
"""

from dataclasses import dataclass
from typing import List, Optional

from ...core.constants import (
    FALLBACK_MESSAGE_SEPARATOR,
    FALLBACK_MIN_MESSAGE_LENGTH,
    NO_SYMPTOMS_SUMMARY,
    SYMPTOM_SEPARATOR,
)
from ...domain.entities.session import Session


@dataclass(frozen=True)
class BookingRequest:
    patient_name: str
    symptoms_summary: str


def collect_structured_symptoms(session: Session) -> List[str]:
    """Symptoms the assistant extracted, in conversation order."""
    symptoms: List[str] = []
    for message in session.bot_messages():
        if message.metadata is not None:
            symptoms.extend(message.metadata.symptoms_extracted)
    return symptoms


def collect_complaint_messages(session: Session) -> List[str]:
    """Patient utterances usable as a chief complaint.

    Very short replies are skipped, as is anything containing the known
    patient name (that turn is usually the patient introducing themself).
    """
    name = session.extracted_patient_name
    complaints = []
    for message in session.user_messages():
        text = message.text
        if len(text) <= FALLBACK_MIN_MESSAGE_LENGTH:
            continue
        if name and name in text:
            continue
        complaints.append(text)
    return complaints


def derive_symptoms_summary(session: Session) -> str:
    symptoms = collect_structured_symptoms(session)
    if symptoms:
        return SYMPTOM_SEPARATOR.join(symptoms)

    complaints = collect_complaint_messages(session)
    if complaints:
        return FALLBACK_MESSAGE_SEPARATOR.join(complaints)

    return NO_SYMPTOMS_SUMMARY


def derive_booking(session: Session, fallback_name: Optional[str]) -> BookingRequest:
    """Build the booking request for ``session``.

    Reads the session only; calling it twice on an unchanged session
    gives the same result.

    Args:
        session: The triage session to summarize.
        fallback_name: Display name of the signed-in account, used when
            the assistant never picked up a patient name.
    """
    patient_name = session.extracted_patient_name or fallback_name or ""
    return BookingRequest(
        patient_name=patient_name,
        symptoms_summary=derive_symptoms_summary(session),
    )
