"""Triage session entity.

The session owns the conversation log for one patient interaction: an
append-only, timestamp-ordered list of messages, plus the patient name
the assistant has picked up along the way.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Set

from ..enums.triage import Language, Sender
from ..errors import MessageNotFoundError, MessageRevisionError
from .message import Message, MessageMetadata

GREETINGS = {
    Language.ENGLISH: "Hello, I am HealthVoice. Before we begin, may I please know your name?",
    Language.HINDI: "नमस्ते, मैं HealthVoice हूँ। शुरू करने से पहले, क्या मैं आपका नाम जान सकता हूँ?",
    Language.TAMIL: "வணக்கம், நான் HealthVoice. நாம் தொடங்குவதற்கு முன், உங்கள் பெயரை நான் தெரிந்து கொள்ளலாமா?",
}

GREETING_MESSAGE_ID = "init"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    """Triage session entity."""

    session_id: str
    user_id: str
    language: Language = Language.ENGLISH
    created_at: datetime = field(default_factory=_utcnow)
    last_active_at: datetime = field(default_factory=_utcnow)
    messages: List[Message] = field(default_factory=list)
    extracted_patient_name: Optional[str] = None
    _revised_message_ids: Set[str] = field(default_factory=set, repr=False)

    @classmethod
    def start(cls, user_id: str, language: Language = Language.ENGLISH) -> "Session":
        """Open a new session seeded with the greeting that asks for the patient's name."""
        session = cls(session_id=uuid.uuid4().hex, user_id=user_id or "guest", language=language)
        session.append_message(
            Sender.BOT,
            GREETINGS.get(language, GREETINGS[Language.ENGLISH]),
            message_id=GREETING_MESSAGE_ID,
        )
        return session

    # ------------------------------------------------------------------
    # Conversation log
    # ------------------------------------------------------------------

    def append_message(
        self,
        sender: Sender,
        text: str,
        metadata: Optional[MessageMetadata] = None,
        message_id: Optional[str] = None,
    ) -> Message:
        """Append a message; timestamps never go backwards within a session."""
        message_id = message_id or uuid.uuid4().hex
        if any(m.message_id == message_id for m in self.messages):
            raise ValueError(f"Duplicate message id '{message_id}' in session '{self.session_id}'")

        timestamp = _utcnow()
        if self.messages and timestamp < self.messages[-1].timestamp:
            timestamp = self.messages[-1].timestamp

        message = Message(
            message_id=message_id,
            session_id=self.session_id,
            sender=sender,
            text=text,
            timestamp=timestamp,
            metadata=metadata,
        )
        self.messages.append(message)
        self.last_active_at = timestamp

        if metadata is not None:
            self.accrue_patient_name(metadata.patient_name)
        return message

    def revise_user_text(self, message_id: str, text: str) -> Message:
        """Replace a USER message's text once its transcription arrives.

        This is the only in-place edit the log allows, and only once per message.
        """
        message = self.find_message(message_id)
        if message is None:
            raise MessageNotFoundError(self.session_id, message_id)
        if not message.is_user:
            raise MessageRevisionError(message_id, "only USER messages can be revised")
        if message_id in self._revised_message_ids:
            raise MessageRevisionError(message_id, "message was already revised")

        message.text = text
        self._revised_message_ids.add(message_id)
        self.last_active_at = _utcnow()
        return message

    def accrue_patient_name(self, name: Optional[str]) -> None:
        """Latest non-empty name wins; an empty name never clears a known one."""
        if name and name.strip():
            self.extracted_patient_name = name.strip()

    def find_message(self, message_id: str) -> Optional[Message]:
        for message in self.messages:
            if message.message_id == message_id:
                return message
        return None

    def user_messages(self) -> List[Message]:
        return [m for m in self.messages if m.is_user]

    def bot_messages(self) -> List[Message]:
        return [m for m in self.messages if m.is_bot]

    def snapshot_messages(self) -> List[Message]:
        """Copy of the log as it stands now."""
        return list(self.messages)
