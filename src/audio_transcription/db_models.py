from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, Float, MetaData, String, Table, Text
from sqlmodel import Field, SQLModel


class TranscriptionStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class TranscriptionRecord(SQLModel):
    """Per-file status record keyed by the source object key."""

    file_identifier: str = Field(min_length=1)
    status: TranscriptionStatus
    source_bucket: str = Field(min_length=1)
    source_key: str = Field(min_length=1)
    transcript_text: Optional[str] = None
    output_location: Optional[str] = None
    error_message: Optional[str] = None
    processing_time: Optional[float] = Field(default=None, ge=0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def transcriptions_table(name: str, metadata: MetaData | None = None) -> Table:
    """Builds the transcription status table under a configurable name."""
    return Table(
        name,
        metadata if metadata is not None else SQLModel.metadata,
        Column("file_identifier", String(1024), primary_key=True),
        Column("status", String(32), nullable=False, index=True),
        Column("source_bucket", String(255), nullable=False),
        Column("source_key", String(1024), nullable=False),
        Column("transcript_text", Text, nullable=True),
        Column("output_location", String(2048), nullable=True),
        Column("error_message", Text, nullable=True),
        Column("processing_time", Float, nullable=True),
        Column("created_at", DateTime(timezone=True), nullable=False),
        Column("updated_at", DateTime(timezone=True), nullable=False),
        extend_existing=True,
    )
