"""User account entity (patient, doctor or admin)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..enums.triage import UserRole


@dataclass
class User:
    """Account entity.

    ``password_hash`` is a bcrypt hash; the plain password never reaches
    the entity.
    """

    user_id: str
    name: str
    email: str
    role: UserRole = UserRole.PATIENT
    password_hash: str = field(default="", repr=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        self.role = UserRole(self.role)
        self.email = self.email.strip().lower()
        if not self.user_id or not self.user_id.strip():
            raise ValueError("user_id must be a non-empty string")
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")

    @property
    def is_doctor(self) -> bool:
        return self.role == UserRole.DOCTOR
