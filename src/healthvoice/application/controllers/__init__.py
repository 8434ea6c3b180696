"""Controllers coordinating the patient session and the doctor dashboard."""

from .doctor_controller import DoctorController
from .registry import DoctorRegistry, SessionRegistry
from .session_controller import PendingSubmission, SessionController

__all__ = [
    "DoctorController",
    "DoctorRegistry",
    "PendingSubmission",
    "SessionController",
    "SessionRegistry",
]
