"""
Speech output adapter that records what would be spoken.

Playback happens on the client; the service side only needs the text and
locale, which it logs.
"""

import logging

from healthvoice.application.ports.services.speech_output_service import SpeechOutputService
from healthvoice.core.constants import SPEECH_LOCALES
from healthvoice.domain.enums.triage import Language

logger = logging.getLogger("healthvoice.speech")


class LoggingSpeechOutputService(SpeechOutputService):
    async def speak(self, text: str, language: Language) -> None:
        locale = SPEECH_LOCALES.get(Language(language).value, SPEECH_LOCALES["en"])
        logger.info("Speech output locale=%s chars=%d", locale, len(text))
