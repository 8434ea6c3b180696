"""
Triage session endpoints: start, converse, book, end.
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, Form, Request, UploadFile, status

from ..deps import AccountRepositoryDep, SessionRegistryDep
from ..errors import NotFoundError, ValidationError
from ..schemas.common import ApiResponse
from ..schemas.triage import AppointmentOut, SessionOut, StartSessionRequest, SubmissionOut
from ..utils.responses import ok
from ...application.ports.services.inference_service import AudioInput

router = APIRouter(prefix="/sessions", tags=["sessions"])
logger = logging.getLogger("healthvoice.api")

MAX_AUDIO_BYTES = 25 * 1024 * 1024


@router.post("", response_model=ApiResponse[SessionOut], status_code=status.HTTP_201_CREATED)
async def start_session(
    request: Request,
    body: StartSessionRequest,
    sessions: SessionRegistryDep,
    accounts: AccountRepositoryDep,
):
    user = None
    if body.user_id:
        user = await accounts.find_by_id(body.user_id)
        if user is None:
            raise NotFoundError(f"User not found ({body.user_id})", {"user_id": body.user_id})
    controller = sessions.open(user, body.language)
    return ok(request, data=SessionOut.from_controller(controller), message="Session started")


@router.get("/{session_id}", response_model=ApiResponse[SessionOut])
async def get_session(request: Request, session_id: str, sessions: SessionRegistryDep):
    controller = sessions.get(session_id)
    return ok(request, data=SessionOut.from_controller(controller))


@router.post("/{session_id}/messages", response_model=ApiResponse[Optional[SubmissionOut]])
async def submit_message(
    request: Request,
    session_id: str,
    sessions: SessionRegistryDep,
    text: Optional[str] = Form(None),
    audio: Optional[UploadFile] = File(None),
):
    controller = sessions.get(session_id)

    audio_input = None
    if audio is not None:
        content = await audio.read()
        if len(content) > MAX_AUDIO_BYTES:
            raise ValidationError(
                "Audio file too large", {"max_bytes": MAX_AUDIO_BYTES, "size": len(content)}
            )
        if content:
            audio_input = AudioInput(
                content=content,
                filename=audio.filename or "recording.webm",
                content_type=audio.content_type or "audio/webm",
            )

    result = await controller.submit_input(audio=audio_input, text=text)
    if result is None or controller.session is None:
        return ok(request, data=None, message="No input")
    return ok(
        request,
        data=SubmissionOut.from_result(result, controller.session.extracted_patient_name),
        message="Processed" if result.succeeded else "Inference failed",
    )


@router.post("/{session_id}/booking", response_model=ApiResponse[Optional[AppointmentOut]])
async def book_appointment(request: Request, session_id: str, sessions: SessionRegistryDep):
    controller = sessions.get(session_id)
    appointment = await controller.book_appointment()
    if appointment is None:
        return ok(request, data=None, message="Sign in to book an appointment")
    return ok(request, data=AppointmentOut.from_domain(appointment), message="Appointment booked")


@router.delete("/{session_id}", response_model=ApiResponse[dict])
async def end_session(request: Request, session_id: str, sessions: SessionRegistryDep):
    sessions.close(session_id)
    return ok(request, data={"session_id": session_id}, message="Session ended")
