"""Idempotency key value object for repeat booking requests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IdempotencyKey:
    """Immutable idempotency key value object."""

    value: str

    def __post_init__(self) -> None:
        """Validate idempotency key format."""
        if not self.value:
            raise ValueError("Idempotency key cannot be empty")

        if not isinstance(self.value, str):
            raise ValueError("Idempotency key must be a string")

        if len(self.value) < 8:
            raise ValueError("Idempotency key must be at least 8 characters")

    def __str__(self) -> str:
        """String representation."""
        return self.value

    @classmethod
    def for_session(cls, session_id: str) -> "IdempotencyKey":
        """Key that makes one booking per triage session."""
        return cls(f"session:{session_id}")
