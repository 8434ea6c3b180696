"""
Speech output interface (text-to-speech playback of bot replies).
"""

from abc import ABC, abstractmethod

from ....domain.enums.triage import Language


class SpeechOutputService(ABC):
    """Abstract text-to-speech sink."""

    @abstractmethod
    async def speak(self, text: str, language: Language) -> None:
        """Speak ``text`` in the locale of ``language``."""
        pass
