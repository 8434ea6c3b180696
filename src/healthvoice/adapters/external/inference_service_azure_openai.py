"""
Azure OpenAI implementation of the triage inference step.

One turn is: optional Whisper transcription of the patient's audio, then
a JSON-mode chat completion that extracts the patient's name and
symptoms, proposes a diagnosis and writes the spoken reply.
"""

import json
import logging
import re
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from healthvoice.application.ports.services.inference_service import (
    AudioInput,
    InferenceRequest,
    InferenceResult,
    InferenceService,
)
from healthvoice.core.ai_client import AzureAIClient
from healthvoice.core.constants import EMPTY_RESPONSE_TEXT
from healthvoice.core.exceptions import InferenceServiceError
from healthvoice.domain.entities.message import Message
from healthvoice.domain.enums.triage import Language

logger = logging.getLogger("healthvoice.inference")

LANGUAGE_NAMES = {
    Language.ENGLISH: "English",
    Language.HINDI: "Hindi",
    Language.TAMIL: "Tamil",
}

SYSTEM_PROMPT = """You are a medical triage assistant named "HealthVoice".

Current language setting: {language_name} ({language_code})

NAME EXTRACTION:
1. If the user input contains a name (e.g. "I am Sarah", "My name is Raj", "Sarah"), put it in "patientName".
2. If the previous BOT message asked for the patient's name, treat the user's next input as their name.

SYMPTOM EXTRACTION:
1. Put specific symptoms (e.g. "headache", "nausea", "rash") in the "symptoms" array.
2. Map described feelings to clinical symptoms (e.g. "I feel hot" -> "Fever").

Task:
1. "transcription": the user's input as text.
2. "patientName": the name if one was given, otherwise omit it.
3. "symptoms": array of extracted symptoms.
4. "diagnosis": top predicted condition, or "Pending" while still gathering information.
5. "confidence": number from 0 to 100.
6. "recommendedAction": short advice on next steps (doctor visit vs home care).
7. "responseText": a polite, empathetic reply in {language_name}.
8. "detectedLanguage": the language code you detected (en, hi, ta).

Respond with a single JSON object only."""


class TriagePayload(BaseModel):
    """Validated JSON answer of the chat model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    transcription: str = ""
    response_text: str = Field(default="", alias="responseText")
    symptoms: List[str] = Field(default_factory=list)
    diagnosis: str = ""
    confidence: float = 0.0
    recommended_action: str = Field(default="", alias="recommendedAction")
    detected_language: str = Field(default="", alias="detectedLanguage")
    patient_name: Optional[str] = Field(default=None, alias="patientName")

    @field_validator("symptoms", mode="before")
    @classmethod
    def coerce_symptoms(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return [str(s).strip() for s in v if s is not None and str(s).strip()]

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> float:
        try:
            value = float(v)
        except (TypeError, ValueError):
            return 0.0
        return max(0.0, min(100.0, value))


def _extract_first_json_object(text: str) -> Optional[dict]:
    """
    JSON extraction:
    - Prefer direct json.loads(text)
    - Else regex pull the first {...} block
    """
    if not text:
        return None
    t = text.strip()
    if t.startswith("{") and t.endswith("}"):
        try:
            return json.loads(t)
        except json.JSONDecodeError:
            pass
    m = re.search(r"\{.*\}", t, re.DOTALL)
    if not m:
        return None
    try:
        return json.loads(m.group())
    except json.JSONDecodeError:
        return None


def format_history(messages: Sequence[Message]) -> str:
    return "\n".join(f"{m.sender.value}: {m.text}" for m in messages)


class AzureOpenAIInferenceService(InferenceService):
    """Inference backed by Azure OpenAI chat + Whisper deployments."""

    def __init__(self, client: AzureAIClient) -> None:
        self._client = client

    async def infer(self, request: InferenceRequest) -> InferenceResult:
        if request.audio is None and not request.text:
            raise InferenceServiceError("No input provided")

        utterance = request.text or ""
        if request.audio is not None:
            utterance = await self._transcribe(request.audio, request.language)

        messages = [
            {
                "role": "system",
                "content": SYSTEM_PROMPT.format(
                    language_name=LANGUAGE_NAMES.get(request.language, "English"),
                    language_code=request.language.value,
                ),
            },
            {"role": "user", "content": self._build_user_content(request.prior_messages, utterance)},
        ]

        try:
            response = await self._client.chat(
                messages, response_format={"type": "json_object"}
            )
        except Exception as e:
            logger.error("Chat completion failed: %s", e)
            raise InferenceServiceError(f"Chat completion failed: {e}") from e

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""
        data = _extract_first_json_object(content)
        if data is None:
            raise InferenceServiceError("Empty or non-JSON response from model")

        try:
            payload = TriagePayload.model_validate(data)
        except ValidationError as e:
            raise InferenceServiceError("Model response failed validation", {"errors": e.errors()}) from e

        return InferenceResult(
            transcription=payload.transcription or utterance,
            response_text=payload.response_text.strip() or EMPTY_RESPONSE_TEXT,
            symptoms=payload.symptoms,
            diagnosis=payload.diagnosis,
            confidence=payload.confidence,
            recommended_action=payload.recommended_action,
            detected_language=payload.detected_language,
            patient_name=(payload.patient_name or "").strip() or None,
        )

    async def _transcribe(self, audio: AudioInput, language: Language) -> str:
        try:
            resp = await self._client.transcribe_whisper(
                (audio.filename, audio.content, audio.content_type),
                language=language.value,
            )
        except Exception as e:
            logger.error("Whisper transcription failed: %s", e)
            raise InferenceServiceError(f"Transcription failed: {e}") from e
        return (getattr(resp, "text", "") or "").strip()

    @staticmethod
    def _build_user_content(prior_messages: Sequence[Message], utterance: str) -> str:
        parts = []
        history = format_history(prior_messages)
        if history:
            parts.append(f"Conversation History:\n{history}\n---End History---\n")
        parts.append(f"User Input: {utterance}")
        return "\n".join(parts)


class UnavailableInferenceService(InferenceService):
    """Stand-in used when no Azure OpenAI deployment is configured.

    Every turn fails, so patients get the standard apology reply.
    """

    async def infer(self, request: InferenceRequest) -> InferenceResult:
        raise InferenceServiceError(
            "Azure OpenAI is not configured. Set AZURE_OPENAI_ENDPOINT and AZURE_OPENAI_API_KEY."
        )
