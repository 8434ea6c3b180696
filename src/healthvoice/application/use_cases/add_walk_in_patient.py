"""Add walk-in patient use case for patients registered at the front desk without triage."""

from typing import Optional

from ..ports.repositories.appointment_repo import AppointmentRepository
from ...core.constants import WALK_IN_SYMPTOMS
from ...domain.entities.appointment import Appointment
from ...domain.value_objects.patient_id import PatientId


class AddWalkInPatientRequest:
    """Request for adding a walk-in patient."""
    def __init__(self, name: str, symptoms: Optional[str] = None):
        self.name = name
        self.symptoms = symptoms


class AddWalkInPatientUseCase:
    """Create a scheduled appointment directly, bypassing booking derivation."""

    def __init__(self, appointment_repository: AppointmentRepository):
        self._appointment_repository = appointment_repository

    async def execute(self, request: AddWalkInPatientRequest) -> Optional[Appointment]:
        name = (request.name or "").strip()
        if not name:
            return None

        return await self._appointment_repository.create(
            patient_id=PatientId.generate_manual().value,
            patient_name=name,
            symptoms_summary=(request.symptoms or "").strip() or WALK_IN_SYMPTOMS,
        )
