"""Domain models for the audio transcription service."""

from enum import Enum
from urllib.parse import unquote_plus

from pydantic import BaseModel, ConfigDict, Field


class StorageBucket(BaseModel, frozen=True):
    name: str


class StorageObject(BaseModel, frozen=True):
    model_config = ConfigDict(extra="ignore")

    key: str
    size: int | None = None


class StorageEntity(BaseModel, frozen=True):
    model_config = ConfigDict(extra="ignore")

    bucket: StorageBucket
    object: StorageObject


class StorageEventRecord(BaseModel, frozen=True):
    """One S3-format record of a bucket notification."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    event_name: str | None = Field(default=None, alias="eventName")
    s3: StorageEntity


class StorageEvent(BaseModel, frozen=True):
    """A bucket notification as published by MinIO, holding a batch of records."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    event_name: str | None = Field(default=None, alias="EventName")
    key: str | None = Field(default=None, alias="Key")
    records: list[StorageEventRecord] = Field(default_factory=list, alias="Records")


class FileNotification(BaseModel, frozen=True):
    """A decoded file-ready notification."""

    bucket_name: str
    object_name: str

    @classmethod
    def from_record(cls, record: StorageEventRecord) -> "FileNotification":
        """Decodes the URL-encoded object key carried by the event."""
        return cls(
            bucket_name=record.s3.bucket.name,
            object_name=unquote_plus(record.s3.object.key),
        )


class TranscriptionResponse(BaseModel, frozen=True):
    """Response body of the external transcription API."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    text: str = ""
    success: bool = False
    error: str | None = None


class ProcessingStatus(str, Enum):
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"


class ProcessingResult(BaseModel, frozen=True):
    """Outcome of one successful (or skipped) orchestrator run."""

    file_identifier: str
    status: ProcessingStatus
    output_location: str | None = None
    processing_time: float | None = None


class DispatchSummary(BaseModel):
    """Per-batch counters reported by the event dispatcher."""

    processed: int = 0
    skipped: int = 0
    failed: int = 0
