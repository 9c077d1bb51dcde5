"""Handler that runs the per-file transcription workflow."""

import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from audio_transcription.db_models import TranscriptionStatus
from audio_transcription.domain import (
    ProcessingResult,
    ProcessingStatus,
    derive_transcript_object_name,
    object_location,
)
from audio_transcription.exceptions import (
    PresignedURLError,
    StorageUploadError,
)
from audio_transcription.infrastructure.interfaces import (
    StorageClient,
    TranscriptionService,
    TranscriptionStateStore,
)
from audio_transcription.logging import setup_logging

logger = setup_logging()

PRESIGNED_URL_TTL_SECONDS = 3600


class TranscriptionHandler:
    """
    Orchestrates audio-to-transcription operations for a single file.

    The record moves IN_PROGRESS -> COMPLETED or IN_PROGRESS -> FAILED.
    Writing FAILED or COMPLETED is best-effort: a failed write is logged and
    never replaces the outcome already decided by the workflow.
    """

    def __init__(
        self,
        storage: StorageClient,
        state_store: TranscriptionStateStore,
        transcription_service: TranscriptionService,
        output_bucket: str | None = None,
        presigned_url_ttl_seconds: int = PRESIGNED_URL_TTL_SECONDS,
        stale_in_progress_seconds: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._storage = storage
        self._state_store = state_store
        self._transcription_service = transcription_service
        self._output_bucket = output_bucket
        self._presigned_url_ttl_seconds = presigned_url_ttl_seconds
        self._stale_in_progress_seconds = stale_in_progress_seconds
        self._clock = clock

    def process(self, source_bucket: str, source_key: str) -> ProcessingResult:
        """
        Transcribes one audio object and records the outcome.

        Args:
            source_bucket: Bucket holding the audio object.
            source_key: Object key; also the record's file identifier.

        Returns:
            ProcessingResult with status SKIPPED when the file is already
            completed or in flight, COMPLETED otherwise.

        Raises:
            StateStoreError: If the record cannot be claimed.
            PresignedURLError: If no read URL can be issued for the audio.
            TranscriptionError: If the transcription service call fails.
            Any other error from the storage or transcription step is
            re-raised after the record is marked FAILED.
        """
        started = self._clock()
        file_identifier = source_key

        logger.info(
            "Processing audio",
            extra={"file_identifier": file_identifier, "bucket_name": source_bucket},
        )

        claimed = self._state_store.try_claim(
            file_identifier,
            source_bucket,
            source_key,
            stale_before=self._stale_before(),
        )
        if not claimed:
            logger.info(
                "File already processed or in progress, skipping",
                extra={"file_identifier": file_identifier},
            )
            return ProcessingResult(
                file_identifier=file_identifier, status=ProcessingStatus.SKIPPED
            )

        try:
            audio_url = self._storage.generate_presigned_url(
                source_bucket, source_key, self._presigned_url_ttl_seconds
            )
        except Exception as e:
            cause = e.cause if isinstance(e, PresignedURLError) and e.cause else e
            self._record_failure(
                file_identifier, f"Failed to generate pre-signed URL: {cause}"
            )
            raise

        logger.info(
            "Sending audio for transcription",
            extra={"file_identifier": file_identifier},
        )
        try:
            response = self._transcription_service.transcribe_audio(audio_url)
        except Exception as e:
            self._record_failure(file_identifier, f"Transcription API error: {e}")
            raise

        processing_time = self._clock() - started

        output_location = None
        if self._output_bucket and response.text:
            output_location = self._upload_transcript(source_key, response.text)

        self._record_completion(
            file_identifier, response.text, output_location, processing_time
        )

        logger.info(
            "Audio processed",
            extra={
                "file_identifier": file_identifier,
                "processing_time": round(processing_time, 2),
                "output_location": output_location,
            },
        )
        return ProcessingResult(
            file_identifier=file_identifier,
            status=ProcessingStatus.COMPLETED,
            output_location=output_location,
            processing_time=processing_time,
        )

    def _stale_before(self) -> datetime | None:
        if not self._stale_in_progress_seconds:
            return None
        return datetime.now(timezone.utc) - timedelta(
            seconds=self._stale_in_progress_seconds
        )

    def _upload_transcript(self, source_key: str, text: str) -> str | None:
        """Stores the transcript beside other transcripts; failures are non-fatal."""
        object_name = derive_transcript_object_name(source_key)
        try:
            self._storage.upload_text(self._output_bucket, object_name, text)
        except StorageUploadError:
            logger.warning(
                "Failed to upload transcript, continuing without output location",
                extra={"file_identifier": source_key, "object_name": object_name},
                exc_info=True,
            )
            return None

        location = object_location(self._output_bucket, object_name)
        logger.info(
            "Transcript uploaded",
            extra={"file_identifier": source_key, "output_location": location},
        )
        return location

    def _record_failure(self, file_identifier: str, error_message: str) -> None:
        self._best_effort_update(
            file_identifier, TranscriptionStatus.FAILED, error_message=error_message
        )

    def _record_completion(
        self,
        file_identifier: str,
        text: str,
        output_location: str | None,
        processing_time: float,
    ) -> None:
        self._best_effort_update(
            file_identifier,
            TranscriptionStatus.COMPLETED,
            transcript_text=text,
            output_location=output_location,
            processing_time=processing_time,
        )

    def _best_effort_update(
        self, file_identifier: str, status: TranscriptionStatus, **fields
    ) -> None:
        try:
            self._state_store.update_status(file_identifier, status, **fields)
        except Exception:
            logger.exception(
                "Failed to update transcription record status",
                extra={"file_identifier": file_identifier, "status": status.value},
            )
