"""Dispatches file-ready notifications to the transcription handler."""

import posixpath
from collections.abc import Iterable

from audio_transcription.domain import (
    DispatchSummary,
    FileNotification,
    ProcessingStatus,
    StorageEvent,
)
from audio_transcription.logging import setup_logging

from .transcription_handler import TranscriptionHandler

logger = setup_logging()

SUPPORTED_AUDIO_EXTENSIONS = frozenset(
    {".aac", ".mp3", ".wav", ".flac", ".ogg", ".m4a"}
)


def is_supported_audio(object_name: str) -> bool:
    """Checks the object's extension against the audio allow-list, ignoring case."""
    return posixpath.splitext(object_name)[1].lower() in SUPPORTED_AUDIO_EXTENSIONS


def notifications_from_event(event: StorageEvent) -> list[FileNotification]:
    """Decodes every record of a bucket notification."""
    return [FileNotification.from_record(record) for record in event.records]


class EventDispatcher:
    """Runs the transcription handler once per supported file in a batch."""

    def __init__(self, handler: TranscriptionHandler):
        self._handler = handler

    def dispatch(self, notifications: Iterable[FileNotification]) -> DispatchSummary:
        """
        Processes notifications sequentially.

        A failure for one file is logged and counted; the remaining files are
        still processed and the batch itself never fails.
        """
        notifications = list(notifications)
        summary = DispatchSummary()
        total = len(notifications)
        logger.info("Received notifications", extra={"count": total})

        for index, notification in enumerate(notifications, start=1):
            log_context = {
                "position": f"{index}/{total}",
                "bucket_name": notification.bucket_name,
                "object_name": notification.object_name,
            }

            if not is_supported_audio(notification.object_name):
                logger.info("Skipping file with unsupported extension", extra=log_context)
                summary.skipped += 1
                continue

            try:
                result = self._handler.process(
                    notification.bucket_name, notification.object_name
                )
            except Exception:
                logger.exception("File processing failed", extra=log_context)
                summary.failed += 1
                continue

            if result.status == ProcessingStatus.SKIPPED:
                summary.skipped += 1
            else:
                summary.processed += 1

        logger.info("Notifications dispatched", extra=summary.model_dump())
        return summary
