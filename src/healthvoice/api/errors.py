from typing import Optional

from ..domain.errors import DomainError


class APIError(Exception):
    def __init__(self, code: str, message: str, http_status: int = 400, details: Optional[dict] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details


class ValidationError(APIError):
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("INVALID_INPUT", message, 422, details)


class NotFoundError(APIError):
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("NOT_FOUND", message, 404, details)


class ConflictError(APIError):
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("CONFLICT", message, 409, details)


class UnauthorizedError(APIError):
    def __init__(self, message: str = "Unauthorized", details: Optional[dict] = None):
        super().__init__("UNAUTHORIZED", message, 401, details)


# Domain error codes that are not plain 400s
_DOMAIN_STATUS = {
    "SESSION_NOT_ACTIVE": 404,
    "MESSAGE_NOT_FOUND": 404,
    "APPOINTMENT_NOT_FOUND": 404,
    "NO_ACTIVE_CONSULTATION": 409,
    "SUBMISSION_IN_PROGRESS": 409,
    "APPOINTMENT_CONFLICT": 409,
    "CONSULTATION_ALREADY_ACTIVE": 409,
    "DUPLICATE_ACCOUNT": 409,
}


def domain_error_status(exc: DomainError) -> int:
    return _DOMAIN_STATUS.get(exc.error_code or "", 400)
