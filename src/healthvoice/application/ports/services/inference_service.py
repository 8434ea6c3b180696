"""
Inference service interface: transcription, symptom extraction and reply
generation for one patient turn.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ....domain.entities.message import Message, MessageMetadata
from ....domain.enums.triage import Language


@dataclass
class AudioInput:
    """Recorded patient audio."""

    content: bytes
    filename: str = "recording.webm"
    content_type: str = "audio/webm"


@dataclass
class InferenceRequest:
    """One patient turn plus the conversation that preceded it."""

    language: Language
    prior_messages: Sequence[Message] = field(default_factory=list)
    audio: Optional[AudioInput] = None
    text: Optional[str] = None


@dataclass
class InferenceResult:
    """Structured output of one inference call."""

    transcription: str
    response_text: str
    symptoms: List[str] = field(default_factory=list)
    diagnosis: str = ""
    confidence: float = 0.0
    recommended_action: str = ""
    detected_language: str = ""
    patient_name: Optional[str] = None

    def to_metadata(self) -> MessageMetadata:
        return MessageMetadata(
            symptoms_extracted=list(self.symptoms),
            diagnosis=self.diagnosis,
            confidence=self.confidence,
            recommended_action=self.recommended_action,
            detected_language=self.detected_language,
            patient_name=self.patient_name,
        )


class InferenceService(ABC):
    """Abstract remote inference step."""

    @abstractmethod
    async def infer(self, request: InferenceRequest) -> InferenceResult:
        """
        Run one turn of the triage assistant.

        Raises:
            InferenceServiceError: the call failed or returned unusable data.
        """
        pass
