"""
Patient ID value object.

Authenticated patients use their account id. Patients added by hand at
the front desk get an id in the separate ``manual-`` namespace.
"""

import time
from dataclasses import dataclass
from typing import Any

MANUAL_PREFIX = "manual-"


@dataclass(frozen=True)
class PatientId:
    """Immutable patient identifier value object."""

    value: str

    def __post_init__(self) -> None:
        """Validate patient ID."""
        if not self.value:
            raise ValueError("Patient ID cannot be empty")

        if not isinstance(self.value, str):
            raise ValueError("Patient ID must be a string")

    def __str__(self) -> str:
        """String representation."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if not isinstance(other, PatientId):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        """Hash for use in sets and dictionaries."""
        return hash(self.value)

    @property
    def is_manual(self) -> bool:
        return self.value.startswith(MANUAL_PREFIX)

    @classmethod
    def for_account(cls, user_id: str) -> "PatientId":
        """Patient ID of an authenticated account."""
        if user_id.startswith(MANUAL_PREFIX):
            raise ValueError(f"Account IDs cannot use the '{MANUAL_PREFIX}' namespace")
        return cls(user_id)

    @classmethod
    def generate_manual(cls) -> "PatientId":
        """Generate an ID for a patient added manually by the doctor."""
        return cls(f"{MANUAL_PREFIX}{int(time.time() * 1000)}")
