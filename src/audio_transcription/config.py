"""Application configuration loaded from environment variables."""

import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from audio_transcription.exceptions import ConfigurationError

REQUIRED_VARIABLES = ("TRANSCRIPTIONS_TABLE_NAME", "TRANSCRIPTION_SECRET_NAME")


class MinioConfig(BaseModel, frozen=True):
    """MinIO connection configuration."""

    endpoint: str
    user: str
    password: str
    region: str = "us-east-1"
    secure: bool = False
    output_bucket: str | None = None


class QueueConfig(BaseModel, frozen=True):
    """RabbitMQ queue configuration."""

    name: str
    queue_type: str = "quorum"
    max_delivery_count: int = 3
    expected_routing_key: str
    dlq_name: str
    dlq_exchange_name: str = "dead_letter_exchange"
    dlq_routing_key: str


class RabbitMQConfig(BaseModel, frozen=True):
    """RabbitMQ connection configuration."""

    host: str
    user: str
    password: str
    exchange_name: str = "storage_events"
    queue_config: QueueConfig = QueueConfig(
        name="audio_transcription_queue",
        expected_routing_key="audio.uploaded",
        dlq_name="dlq_audio_transcriber",
        dlq_routing_key="audio.transcription.failed",
    )


class PostgresConfig(BaseModel, frozen=True):
    """Transcription state store configuration."""

    table_name: str
    host: str = "postgres"
    user: str = ""
    password: str = ""
    port: int = 5432
    database: str = ""
    url: str | None = None

    @property
    def database_url(self) -> str:
        if self.url:
            return self.url
        return (
            f"postgresql+psycopg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class TranscriptionAPIConfig(BaseModel, frozen=True):
    """External speech-to-text API configuration."""

    secret_name: str
    base_url: str = "https://api.elevenlabs.io/v1"
    timeout_seconds: float = 30.0
    secrets_dir: Path = Path("/run/secrets")


class ProcessingConfig(BaseModel, frozen=True):
    """Per-file workflow tuning."""

    presigned_url_ttl_seconds: int = Field(default=3600, gt=0)
    # 0 disables reclaiming of IN_PROGRESS records
    stale_in_progress_seconds: int = Field(default=0, ge=0)


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    minio: MinioConfig
    rabbitmq: RabbitMQConfig
    postgres: PostgresConfig
    transcription_api: TranscriptionAPIConfig
    processing: ProcessingConfig = ProcessingConfig()


def _optional(name: str) -> str | None:
    return os.getenv(name) or None


def load_config() -> AppConfig:
    """
    Loads configuration from environment variables.

    Raises:
        ConfigurationError: If a required variable is missing or a value
            cannot be parsed.
    """
    missing = [
        f"{name} environment variable is required"
        for name in REQUIRED_VARIABLES
        if not os.getenv(name)
    ]
    if missing:
        raise ConfigurationError(missing)

    try:
        return AppConfig(
            minio=MinioConfig(
                endpoint=os.getenv("MINIO_ENDPOINT", "minio:9000"),
                user=os.getenv("MINIO_USER", ""),
                password=os.getenv("MINIO_PASSWORD", ""),
                region=os.getenv("MINIO_REGION") or "us-east-1",
                secure=os.getenv("MINIO_SECURE", "false"),
                output_bucket=_optional("OUTPUT_BUCKET"),
            ),
            rabbitmq=RabbitMQConfig(
                host=os.getenv("RABBITMQ_HOST", "rabbitmq"),
                user=os.getenv("RABBITMQ_USER", ""),
                password=os.getenv("RABBITMQ_PASSWORD", ""),
            ),
            postgres=PostgresConfig(
                table_name=os.environ["TRANSCRIPTIONS_TABLE_NAME"],
                host=os.getenv("POSTGRES_HOST", "postgres"),
                user=os.getenv("POSTGRES_USER", ""),
                password=os.getenv("POSTGRES_PASSWORD", ""),
                port=os.getenv("POSTGRES_PORT", "5432"),
                database=os.getenv("POSTGRES_DB", ""),
                url=_optional("DATABASE_URL"),
            ),
            transcription_api=TranscriptionAPIConfig(
                secret_name=os.environ["TRANSCRIPTION_SECRET_NAME"],
                base_url=os.getenv("TRANSCRIPTION_API_BASE_URL")
                or "https://api.elevenlabs.io/v1",
                timeout_seconds=os.getenv("TRANSCRIPTION_API_TIMEOUT_SECONDS", "30"),
                secrets_dir=os.getenv("SECRETS_DIR", "/run/secrets"),
            ),
            processing=ProcessingConfig(
                presigned_url_ttl_seconds=os.getenv(
                    "PRESIGNED_URL_TTL_SECONDS", "3600"
                ),
                stale_in_progress_seconds=os.getenv("STALE_IN_PROGRESS_SECONDS", "0"),
            ),
        )
    except ValidationError as e:
        raise ConfigurationError(
            [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        ) from e
