"""Session, message and appointment schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ...application.controllers.session_controller import SessionController
from ...application.dto.triage_dto import CallNextResult, SubmissionResult
from ...application.utils.queue_ordering import QueueView
from ...domain.entities.appointment import Appointment
from ...domain.entities.message import Message
from ...domain.enums.triage import AppointmentStatus, BookingStatus, Language, Sender


class StartSessionRequest(BaseModel):
    user_id: Optional[str] = Field(None, description="Signed-in account; omitted for a guest")
    language: Optional[Language] = Field(None, description="en, hi or ta")


class MetadataOut(BaseModel):
    symptoms_extracted: List[str] = Field(default_factory=list)
    diagnosis: str = ""
    confidence: float = 0.0
    recommended_action: str = ""
    detected_language: str = ""
    patient_name: Optional[str] = None


class MessageOut(BaseModel):
    message_id: str
    sender: Sender
    text: str
    timestamp: datetime
    metadata: Optional[MetadataOut] = None

    @classmethod
    def from_domain(cls, message: Message) -> "MessageOut":
        metadata = None
        if message.metadata is not None:
            m = message.metadata
            metadata = MetadataOut(
                symptoms_extracted=m.symptoms_extracted,
                diagnosis=m.diagnosis,
                confidence=m.confidence,
                recommended_action=m.recommended_action,
                detected_language=m.detected_language,
                patient_name=m.patient_name,
            )
        return cls(
            message_id=message.message_id,
            sender=message.sender,
            text=message.text,
            timestamp=message.timestamp,
            metadata=metadata,
        )


class SessionOut(BaseModel):
    session_id: str
    user_id: str
    language: Language
    created_at: datetime
    last_active_at: datetime
    extracted_patient_name: Optional[str] = None
    is_processing: bool = False
    booking_status: BookingStatus = BookingStatus.IDLE
    pending_message_id: Optional[str] = None
    messages: List[MessageOut] = Field(default_factory=list)

    @classmethod
    def from_controller(cls, controller: SessionController) -> "SessionOut":
        session = controller.session
        return cls(
            session_id=session.session_id,
            user_id=session.user_id,
            language=session.language,
            created_at=session.created_at,
            last_active_at=session.last_active_at,
            extracted_patient_name=session.extracted_patient_name,
            is_processing=controller.is_processing,
            booking_status=controller.booking_status,
            pending_message_id=controller.pending.message_id if controller.pending else None,
            messages=[MessageOut.from_domain(m) for m in session.messages],
        )


class SubmissionOut(BaseModel):
    succeeded: bool
    user_message: MessageOut
    bot_message: MessageOut
    extracted_patient_name: Optional[str] = None

    @classmethod
    def from_result(cls, result: SubmissionResult, patient_name: Optional[str]) -> "SubmissionOut":
        return cls(
            succeeded=result.succeeded,
            user_message=MessageOut.from_domain(result.user_message),
            bot_message=MessageOut.from_domain(result.bot_message),
            extracted_patient_name=patient_name,
        )


class AppointmentOut(BaseModel):
    appointment_id: str
    patient_id: str
    patient_name: str
    doctor_id: Optional[str] = None
    date: str
    time_slot: str
    status: AppointmentStatus
    symptoms_summary: str
    notes: Optional[str] = None
    version: int

    @classmethod
    def from_domain(cls, appointment: Appointment) -> "AppointmentOut":
        return cls(
            appointment_id=appointment.id,
            patient_id=appointment.patient_id,
            patient_name=appointment.patient_name,
            doctor_id=appointment.doctor_id,
            date=appointment.date,
            time_slot=appointment.time_slot,
            status=appointment.status,
            symptoms_summary=appointment.symptoms_summary,
            notes=appointment.notes,
            version=appointment.version,
        )


class QueueOut(BaseModel):
    doctor_id: str
    waiting: List[AppointmentOut] = Field(default_factory=list)
    in_consultation: List[AppointmentOut] = Field(default_factory=list)
    completed: List[AppointmentOut] = Field(default_factory=list)
    active_appointment_id: Optional[str] = None

    @classmethod
    def from_view(cls, doctor_id: str, view: QueueView, active_id: Optional[str]) -> "QueueOut":
        return cls(
            doctor_id=doctor_id,
            waiting=[AppointmentOut.from_domain(a) for a in view.waiting],
            in_consultation=[AppointmentOut.from_domain(a) for a in view.in_consultation],
            completed=[AppointmentOut.from_domain(a) for a in view.completed],
            active_appointment_id=active_id,
        )


class CallNextOut(BaseModel):
    queue_empty: bool
    appointment: Optional[AppointmentOut] = None

    @classmethod
    def from_result(cls, result: CallNextResult) -> "CallNextOut":
        return cls(
            queue_empty=result.queue_empty,
            appointment=AppointmentOut.from_domain(result.appointment) if result.appointment else None,
        )


class CompleteConsultationRequest(BaseModel):
    notes: Optional[str] = Field(None, description="Consultation notes, stored verbatim")


class AddPatientRequest(BaseModel):
    name: str = Field("", description="Patient name; blank is ignored")
    symptoms: Optional[str] = Field(None, description="Presenting complaint")
