"""Domain layer exports."""

from .models import (
    DispatchSummary,
    FileNotification,
    ProcessingResult,
    ProcessingStatus,
    StorageEvent,
    StorageEventRecord,
    TranscriptionResponse,
)
from .transcript_paths import derive_transcript_object_name, object_location

__all__ = [
    "DispatchSummary",
    "FileNotification",
    "ProcessingResult",
    "ProcessingStatus",
    "StorageEvent",
    "StorageEventRecord",
    "TranscriptionResponse",
    "derive_transcript_object_name",
    "object_location",
]
