"""Abstract interface for transcription record persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from audio_transcription.db_models import TranscriptionRecord, TranscriptionStatus


class TranscriptionStateStore(ABC):
    """Create/read/partial-update access to per-file transcription records."""

    @abstractmethod
    def create(self, record: TranscriptionRecord) -> TranscriptionRecord:
        """
        Inserts a new record, stamping created_at and updated_at.

        Raises:
            RecordAlreadyExistsError: If the identifier is already taken.
            StateStoreError: If the record is invalid or the store fails.
        """

    @abstractmethod
    def get(self, file_identifier: str) -> TranscriptionRecord | None:
        """
        Fetches a record, returning None when it does not exist.

        Raises:
            StateStoreError: If the store fails.
        """

    @abstractmethod
    def update_status(
        self,
        file_identifier: str,
        status: TranscriptionStatus,
        *,
        transcript_text: str | None = None,
        output_location: str | None = None,
        error_message: str | None = None,
        processing_time: float | None = None,
    ) -> None:
        """
        Partially updates an existing record.

        Only non-empty optional values are written; updated_at is always
        refreshed.

        Raises:
            RecordNotFoundError: If no record exists for the identifier.
            StateStoreError: If the store fails.
        """

    @abstractmethod
    def try_claim(
        self,
        file_identifier: str,
        source_bucket: str,
        source_key: str,
        *,
        stale_before: datetime | None = None,
    ) -> bool:
        """
        Atomically marks a file IN_PROGRESS for the calling run.

        Creates the record when absent, or moves any existing record that is
        neither COMPLETED nor IN_PROGRESS (or an IN_PROGRESS record last
        touched before ``stale_before``) to IN_PROGRESS.

        Returns:
            True if this run now owns the file, False if the file is
            completed or owned by another run.

        Raises:
            StateStoreError: If the store fails.
        """
