"""SQL implementation of the TranscriptionStateStore interface."""

from collections.abc import Callable
from datetime import datetime, timezone

from pydantic import ValidationError
from sqlalchemy import Table, and_, insert, or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from audio_transcription.db_models import TranscriptionRecord, TranscriptionStatus
from audio_transcription.exceptions import (
    RecordAlreadyExistsError,
    RecordNotFoundError,
    StateStoreError,
)
from audio_transcription.logging import setup_logging

from .interfaces import TranscriptionStateStore

logger = setup_logging()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SQLTranscriptionStore(TranscriptionStateStore):
    """
    Stores transcription records in a relational table.

    Every operation runs in its own transaction. ``try_claim`` relies on the
    primary key for create-if-absent and on a status-guarded UPDATE for
    reclaiming, so concurrent workers cannot both own the same file.
    """

    def __init__(
        self,
        engine: Engine,
        table: Table,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initializes the store.

        Args:
            engine: SQLAlchemy engine for the state database.
            table: The transcription table (see ``transcriptions_table``).
            clock: Source of the timestamps stamped on records.
        """
        self._engine = engine
        self._table = table
        self._clock = clock

    def create(self, record: TranscriptionRecord) -> TranscriptionRecord:
        return self._insert(record.model_dump())

    def _insert(self, fields: dict) -> TranscriptionRecord:
        now = self._clock()
        try:
            stamped = TranscriptionRecord.model_validate(
                {**fields, "created_at": now, "updated_at": now}
            )
        except ValidationError as e:
            raise StateStoreError(
                fields.get("file_identifier", ""), "create", cause=e
            ) from e

        values = stamped.model_dump()
        values["status"] = stamped.status.value
        try:
            with self._engine.begin() as conn:
                conn.execute(insert(self._table).values(**values))
        except IntegrityError as e:
            raise RecordAlreadyExistsError(stamped.file_identifier, cause=e) from e
        except SQLAlchemyError as e:
            logger.exception(
                "Transcription record create failed",
                extra={"file_identifier": stamped.file_identifier},
            )
            raise StateStoreError(stamped.file_identifier, "create", cause=e) from e

        logger.info(
            "Transcription record created",
            extra={
                "file_identifier": stamped.file_identifier,
                "status": stamped.status.value,
            },
        )
        return stamped

    def get(self, file_identifier: str) -> TranscriptionRecord | None:
        statement = select(self._table).where(
            self._table.c.file_identifier == file_identifier
        )
        try:
            with self._engine.connect() as conn:
                row = conn.execute(statement).mappings().first()
        except SQLAlchemyError as e:
            logger.exception(
                "Transcription record read failed",
                extra={"file_identifier": file_identifier},
            )
            raise StateStoreError(file_identifier, "get", cause=e) from e

        if row is None:
            return None
        return TranscriptionRecord.model_validate(dict(row))

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
        values = {"status": TranscriptionStatus(status).value, "updated_at": self._clock()}
        if transcript_text:
            values["transcript_text"] = transcript_text
        if output_location:
            values["output_location"] = output_location
        if error_message:
            values["error_message"] = error_message
        if processing_time is not None and processing_time > 0:
            values["processing_time"] = processing_time

        statement = (
            update(self._table)
            .where(self._table.c.file_identifier == file_identifier)
            .values(**values)
        )
        try:
            with self._engine.begin() as conn:
                result = conn.execute(statement)
        except SQLAlchemyError as e:
            logger.exception(
                "Transcription record update failed",
                extra={"file_identifier": file_identifier, "status": values["status"]},
            )
            raise StateStoreError(file_identifier, "update", cause=e) from e

        if result.rowcount == 0:
            raise RecordNotFoundError(file_identifier)

        logger.info(
            "Transcription record status updated",
            extra={"file_identifier": file_identifier, "status": values["status"]},
        )

    def try_claim(
        self,
        file_identifier: str,
        source_bucket: str,
        source_key: str,
        *,
        stale_before: datetime | None = None,
    ) -> bool:
        try:
            self._insert(
                {
                    "file_identifier": file_identifier,
                    "status": TranscriptionStatus.IN_PROGRESS,
                    "source_bucket": source_bucket,
                    "source_key": source_key,
                }
            )
            return True
        except RecordAlreadyExistsError:
            pass

        columns = self._table.c
        claimable = columns.status.not_in(
            [TranscriptionStatus.COMPLETED.value, TranscriptionStatus.IN_PROGRESS.value]
        )
        if stale_before is not None:
            claimable = or_(
                claimable,
                and_(
                    columns.status == TranscriptionStatus.IN_PROGRESS.value,
                    columns.updated_at < stale_before,
                ),
            )

        statement = (
            update(self._table)
            .where(columns.file_identifier == file_identifier, claimable)
            .values(
                status=TranscriptionStatus.IN_PROGRESS.value,
                updated_at=self._clock(),
            )
        )
        try:
            with self._engine.begin() as conn:
                result = conn.execute(statement)
        except SQLAlchemyError as e:
            logger.exception(
                "Transcription record claim failed",
                extra={"file_identifier": file_identifier},
            )
            raise StateStoreError(file_identifier, "claim", cause=e) from e

        claimed = result.rowcount == 1
        logger.info(
            "Transcription record reclaimed" if claimed else "Transcription record not claimable",
            extra={"file_identifier": file_identifier},
        )
        return claimed
