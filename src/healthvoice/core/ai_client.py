"""
Azure OpenAI client wrapper for the triage assistant.

Only the two calls the assistant needs are exposed: a chat completion
and a Whisper transcription. Prompting and output validation live in
the inference adapter.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from openai import AsyncAzureOpenAI

from .config import AzureOpenAISettings, get_settings
from .exceptions import ConfigurationError


class AzureAIClient:
    """
    Thin wrapper around AsyncAzureOpenAI.

    Deployment names come from ``AzureOpenAISettings``.
    """

    def __init__(self, settings: Optional[AzureOpenAISettings] = None) -> None:
        settings = settings or get_settings().azure_openai

        if not settings.endpoint or not settings.api_key:
            raise ConfigurationError(
                "Azure OpenAI endpoint and API key must be configured. "
                "Set AZURE_OPENAI_ENDPOINT and AZURE_OPENAI_API_KEY."
            )
        if not settings.deployment_name:
            raise ConfigurationError(
                "Azure OpenAI deployment name is required. "
                "Set AZURE_OPENAI_DEPLOYMENT_NAME."
            )

        self._deployment_name = settings.deployment_name
        self._whisper_deployment_name = settings.whisper_deployment_name
        self._temperature = settings.temperature

        # Azure SDK does not expect a trailing slash
        self._client = AsyncAzureOpenAI(
            api_key=settings.api_key,
            api_version=settings.api_version,
            azure_endpoint=settings.endpoint.rstrip("/"),
        )

    @property
    def deployment_name(self) -> str:
        return self._deployment_name

    async def chat(
        self,
        messages: Sequence[Dict[str, str]],
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs: Any,
    ):
        """Chat completion against the configured deployment."""
        return await self._client.chat.completions.create(
            model=self._deployment_name,
            messages=list(messages),
            temperature=self._temperature if temperature is None else temperature,
            max_tokens=max_tokens,
            **kwargs,
        )

    async def transcribe_whisper(
        self,
        file: Any,
        *,
        language: Optional[str] = None,
        **kwargs: Any,
    ):
        """
        Transcribe audio using the Whisper deployment.

        Args:
            file: ``(filename, bytes, content_type)`` tuple or binary file object.
            language: Optional ISO-639-1 language code.
        """
        if not self._whisper_deployment_name:
            raise ConfigurationError(
                "Azure OpenAI Whisper deployment name is required. "
                "Set AZURE_OPENAI_WHISPER_DEPLOYMENT_NAME."
            )
        if language:
            kwargs["language"] = language
        return await self._client.audio.transcriptions.create(
            model=self._whisper_deployment_name,
            file=file,
            **kwargs,
        )

    async def close(self) -> None:
        await self._client.close()


__all__ = ["AzureAIClient"]
