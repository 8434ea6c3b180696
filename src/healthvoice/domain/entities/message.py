"""Conversation message entity and the AI metadata attached to bot replies."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from ..enums.triage import Sender


@dataclass
class MessageMetadata:
    """Structured triage data returned with a bot reply."""

    symptoms_extracted: List[str] = field(default_factory=list)
    diagnosis: str = ""
    confidence: float = 0.0  # 0..100
    recommended_action: str = ""
    detected_language: str = ""
    patient_name: Optional[str] = None

    def __post_init__(self) -> None:
        self.confidence = max(0.0, min(100.0, float(self.confidence or 0.0)))
        self.symptoms_extracted = [s.strip() for s in self.symptoms_extracted if s and s.strip()]


@dataclass
class Message:
    """A single entry in a session's conversation log."""

    message_id: str
    session_id: str
    sender: Sender
    text: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Optional[MessageMetadata] = None

    def __post_init__(self) -> None:
        # Metadata only ever rides on bot replies
        if self.metadata is not None and self.sender != Sender.BOT:
            raise ValueError("Only BOT messages may carry metadata")

    @property
    def is_user(self) -> bool:
        return self.sender == Sender.USER

    @property
    def is_bot(self) -> bool:
        return self.sender == Sender.BOT
