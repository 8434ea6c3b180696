"""
MongoDB Beanie model for appointment records.
"""

from datetime import datetime, timezone
from typing import Optional

from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel


class AppointmentMongo(Document):
    """MongoDB model for an appointment in the clinic queue."""

    appointment_id: str = Field(..., description="Appointment ID (appt-...)")
    patient_id: str = Field(..., description="Account ID or manual- ID")
    patient_name: str = Field(..., description="Name written on the booking")
    doctor_id: Optional[str] = Field(None, description="Assigned doctor")
    date: str = Field(..., description="ISO date YYYY-MM-DD")
    time_slot: str = Field(..., description="Slot label, e.g. 09:00 AM")
    status: str = Field(default="scheduled", description="scheduled, in-progress, completed")
    symptoms_summary: str = Field(default="", description="Derived symptom summary")
    notes: Optional[str] = Field(None, description="Doctor's consultation notes")
    version: int = Field(default=1, description="Optimistic concurrency counter")
    idempotency_key: Optional[str] = Field(None, description="Booking idempotency key")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "appointments"
        indexes = [
            IndexModel([("appointment_id", ASCENDING)], unique=True),
            IndexModel(
                [("idempotency_key", ASCENDING)],
                unique=True,
                partialFilterExpression={"idempotency_key": {"$type": "string"}},
            ),
            [("doctor_id", 1), ("status", 1)],
            "created_at",
        ]
