"""
Domain-specific error types for business rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class SessionNotActiveError(DomainError):
    """No triage session is open."""

    def __init__(self, session_id: Optional[str] = None) -> None:
        message = "No active triage session"
        if session_id:
            message = f"Triage session '{session_id}' is not active"
        super().__init__(message, "SESSION_NOT_ACTIVE", {"session_id": session_id})


class SubmissionInProgressError(DomainError):
    """A previous input is still awaiting its AI response."""

    def __init__(self, session_id: str, pending_message_id: str) -> None:
        message = f"Session '{session_id}' is still processing message '{pending_message_id}'"
        super().__init__(
            message,
            "SUBMISSION_IN_PROGRESS",
            {"session_id": session_id, "pending_message_id": pending_message_id},
        )


class MessageNotFoundError(DomainError):
    """Message not found in the conversation log."""

    def __init__(self, session_id: str, message_id: str) -> None:
        message = f"Message '{message_id}' not found in session '{session_id}'"
        super().__init__(
            message, "MESSAGE_NOT_FOUND", {"session_id": session_id, "message_id": message_id}
        )


class MessageRevisionError(DomainError):
    """A message cannot be revised."""

    def __init__(self, message_id: str, reason: str) -> None:
        message = f"Cannot revise message '{message_id}': {reason}"
        super().__init__(message, "MESSAGE_REVISION_REJECTED", {"message_id": message_id})


class AppointmentNotFoundError(DomainError):
    """Appointment not found."""

    def __init__(self, appointment_id: str) -> None:
        message = f"Appointment with ID '{appointment_id}' not found"
        super().__init__(message, "APPOINTMENT_NOT_FOUND", {"appointment_id": appointment_id})


class InvalidAppointmentDataError(DomainError):
    """Invalid appointment data."""

    def __init__(self, field: str, value: Any) -> None:
        message = f"Invalid appointment data. Field: {field}, Value: {value}"
        super().__init__(
            message, "INVALID_APPOINTMENT_DATA", {"field": field, "value": value}
        )


class InvalidStatusTransitionError(DomainError):
    """Appointment status may only move scheduled -> in-progress -> completed."""

    def __init__(self, appointment_id: str, current: str, requested: str) -> None:
        message = f"Invalid transition for appointment '{appointment_id}': {current} -> {requested}"
        super().__init__(
            message,
            "INVALID_STATUS_TRANSITION",
            {"appointment_id": appointment_id, "current": current, "requested": requested},
        )


class ImmutableFieldError(DomainError):
    """An update tried to change a field fixed at creation."""

    def __init__(self, appointment_id: str, field: str) -> None:
        message = f"Field '{field}' of appointment '{appointment_id}' cannot change after creation"
        super().__init__(
            message, "IMMUTABLE_FIELD", {"appointment_id": appointment_id, "field": field}
        )


class AppointmentConflictError(DomainError):
    """The appointment was changed by another writer since it was read."""

    def __init__(self, appointment_id: str, expected_version: int, actual_version: int) -> None:
        message = (
            f"Appointment '{appointment_id}' was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
        super().__init__(
            message,
            "APPOINTMENT_CONFLICT",
            {
                "appointment_id": appointment_id,
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )


class ConsultationAlreadyActiveError(DomainError):
    """The doctor already has a patient in consultation."""

    def __init__(self, doctor_id: str, appointment_id: str) -> None:
        message = f"Doctor '{doctor_id}' is already consulting appointment '{appointment_id}'"
        super().__init__(
            message,
            "CONSULTATION_ALREADY_ACTIVE",
            {"doctor_id": doctor_id, "appointment_id": appointment_id},
        )


class NoActiveConsultationError(DomainError):
    """No consultation is open."""

    def __init__(self, doctor_id: str) -> None:
        message = f"Doctor '{doctor_id}' has no open consultation"
        super().__init__(message, "NO_ACTIVE_CONSULTATION", {"doctor_id": doctor_id})


class DuplicateAccountError(DomainError):
    """An account with this email already exists."""

    def __init__(self, email: str) -> None:
        super().__init__("User already exists", "DUPLICATE_ACCOUNT", {"email": email})
