"""Service ports."""

from .inference_service import AudioInput, InferenceRequest, InferenceResult, InferenceService
from .speech_output_service import SpeechOutputService

__all__ = [
    "AudioInput",
    "InferenceRequest",
    "InferenceResult",
    "InferenceService",
    "SpeechOutputService",
]
