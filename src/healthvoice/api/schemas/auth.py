"""Account schemas."""

from pydantic import BaseModel, Field, field_validator

from ...domain.entities.user import User
from ...domain.enums.triage import UserRole


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, description="Account email")
    password: str = Field(..., min_length=1, description="Account password")


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=80, description="Display name")
    email: str = Field(..., min_length=3, description="Account email")
    password: str = Field(..., min_length=1, description="Account password")
    role: UserRole = Field(UserRole.PATIENT, description="patient, doctor or admin")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v.strip().lower()


class UserOut(BaseModel):
    user_id: str
    name: str
    email: str
    role: UserRole

    @classmethod
    def from_domain(cls, user: User) -> "UserOut":
        return cls(user_id=user.user_id, name=user.name, email=user.email, role=user.role)
