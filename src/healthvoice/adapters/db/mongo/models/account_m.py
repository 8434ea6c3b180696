"""
MongoDB Beanie model for user accounts.
"""

from datetime import datetime, timezone

from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel


class AccountMongo(Document):
    """MongoDB model for a patient, doctor or admin account."""

    user_id: str = Field(..., description="Account ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Normalized email")
    role: str = Field(default="patient", description="patient, doctor or admin")
    password_hash: str = Field(..., description="bcrypt hash")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "accounts"
        indexes = [
            IndexModel([("email", ASCENDING)], unique=True),
            "user_id",
        ]
