"""Handler layer exports."""

from .event_dispatcher import (
    SUPPORTED_AUDIO_EXTENSIONS,
    EventDispatcher,
    is_supported_audio,
    notifications_from_event,
)
from .transcription_handler import TranscriptionHandler

__all__ = [
    "SUPPORTED_AUDIO_EXTENSIONS",
    "EventDispatcher",
    "TranscriptionHandler",
    "is_supported_audio",
    "notifications_from_event",
]
