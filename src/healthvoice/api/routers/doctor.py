"""
Doctor dashboard endpoints: queue, call next, start, complete, walk-ins, records.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Request

from ..deps import DoctorRegistryDep
from ..schemas.common import ApiResponse
from ..schemas.triage import (
    AddPatientRequest,
    AppointmentOut,
    CallNextOut,
    CompleteConsultationRequest,
    QueueOut,
)
from ..utils.responses import ok

router = APIRouter(prefix="/doctor/{doctor_id}", tags=["doctor"])


def _queue_out(controller) -> QueueOut:
    active = controller.active_appointment
    return QueueOut.from_view(controller.doctor_id, controller.queue, active.id if active else None)


@router.get("/queue", response_model=ApiResponse[QueueOut])
async def get_queue(request: Request, doctor_id: str, doctors: DoctorRegistryDep):
    controller = await doctors.get(doctor_id)
    await controller.refresh()
    return ok(request, data=_queue_out(controller))


@router.post("/queue/next", response_model=ApiResponse[CallNextOut])
async def call_next_patient(request: Request, doctor_id: str, doctors: DoctorRegistryDep):
    controller = await doctors.get(doctor_id)
    result = await controller.call_next_patient()
    return ok(request, data=CallNextOut.from_result(result), message=result.message)


@router.post("/appointments/{appointment_id}/start", response_model=ApiResponse[AppointmentOut])
async def start_consultation(
    request: Request, doctor_id: str, appointment_id: str, doctors: DoctorRegistryDep
):
    controller = await doctors.get(doctor_id)
    appointment = await controller.start_consultation(appointment_id)
    return ok(request, data=AppointmentOut.from_domain(appointment), message="Consultation started")


@router.post("/consultation/complete", response_model=ApiResponse[AppointmentOut])
async def complete_consultation(
    request: Request, doctor_id: str, body: CompleteConsultationRequest, doctors: DoctorRegistryDep
):
    controller = await doctors.get(doctor_id)
    appointment = await controller.complete_consultation(body.notes)
    return ok(request, data=AppointmentOut.from_domain(appointment), message="Consultation completed")


@router.post("/consultation/close", response_model=ApiResponse[QueueOut])
async def close_consultation(request: Request, doctor_id: str, doctors: DoctorRegistryDep):
    controller = await doctors.get(doctor_id)
    controller.close_consultation()
    return ok(request, data=_queue_out(controller))


@router.post("/patients", response_model=ApiResponse[Optional[AppointmentOut]])
async def add_patient(
    request: Request, doctor_id: str, body: AddPatientRequest, doctors: DoctorRegistryDep
):
    controller = await doctors.get(doctor_id)
    appointment = await controller.add_patient(body.name, body.symptoms)
    if appointment is None:
        return ok(request, data=None, message="Patient name is required")
    return ok(request, data=AppointmentOut.from_domain(appointment), message="Patient added")


@router.get("/records", response_model=ApiResponse[List[AppointmentOut]])
async def search_records(
    request: Request,
    doctor_id: str,
    doctors: DoctorRegistryDep,
    q: str = Query("", description="Search term"),
):
    controller = await doctors.get(doctor_id)
    await controller.refresh()
    records = controller.search_records(q)
    return ok(
        request,
        data=[AppointmentOut.from_domain(a) for a in records],
        message=f"Showing {len(records)} records",
    )
