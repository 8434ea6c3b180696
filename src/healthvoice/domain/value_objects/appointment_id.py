"""
Appointment ID value object for type-safe appointment identification.
Format: appt-{SUFFIX}
"""

import time
import uuid
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AppointmentId:
    """Immutable appointment identifier value object."""

    value: str

    def __post_init__(self) -> None:
        """Validate appointment ID format."""
        if not self.value:
            raise ValueError("Appointment ID cannot be empty")

        if not isinstance(self.value, str):
            raise ValueError("Appointment ID must be a string")

        if not self.value.startswith("appt-") or len(self.value) <= len("appt-"):
            raise ValueError("Appointment ID must follow format: appt-{SUFFIX}")

    def __str__(self) -> str:
        """String representation."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if not isinstance(other, AppointmentId):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        """Hash for use in sets and dictionaries."""
        return hash(self.value)

    @classmethod
    def generate(cls) -> "AppointmentId":
        """Generate a new appointment ID from the current epoch milliseconds.

        A short random tail keeps two bookings in the same millisecond apart.
        """
        millis = int(time.time() * 1000)
        return cls(f"appt-{millis}-{uuid.uuid4().hex[:6]}")
