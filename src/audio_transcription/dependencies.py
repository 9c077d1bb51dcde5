"""Dependency injection configuration for the audio-transcriber service."""

import pika
from minio import Minio
from sqlmodel import SQLModel, create_engine

from audio_transcription.config import load_config
from audio_transcription.db_models import transcriptions_table
from audio_transcription.handlers import EventDispatcher, TranscriptionHandler
from audio_transcription.infrastructure import (
    FileSecretResolver,
    HTTPTranscriptionClient,
    MinioStorageClient,
    RabbitMQBroker,
    SQLTranscriptionStore,
)
from audio_transcription.logging import setup_logging
from audio_transcription.worker import Worker

logger = setup_logging()

_config = load_config()

# MinIO setup
_minio_client = Minio(
    endpoint=_config.minio.endpoint,
    access_key=_config.minio.user,
    secret_key=_config.minio.password,
    secure=_config.minio.secure,
    region=_config.minio.region,
)

_storage = MinioStorageClient(_minio_client)
if _config.minio.output_bucket:
    _storage.ensure_bucket_exists(_config.minio.output_bucket)

# State store setup
_db_engine = create_engine(_config.postgres.database_url, pool_pre_ping=True)
_transcriptions = transcriptions_table(_config.postgres.table_name)
SQLModel.metadata.create_all(_db_engine, tables=[_transcriptions])
logger.info(
    "State store initialized",
    extra={"table_name": _config.postgres.table_name},
)

_state_store = SQLTranscriptionStore(_db_engine, _transcriptions)

# Transcription API setup
_secrets = FileSecretResolver(_config.transcription_api.secrets_dir)
_transcription_service = HTTPTranscriptionClient.from_secret(
    _secrets,
    _config.transcription_api.secret_name,
    base_url=_config.transcription_api.base_url,
    timeout=_config.transcription_api.timeout_seconds,
)

# RabbitMQ setup
_credentials = pika.PlainCredentials(_config.rabbitmq.user, _config.rabbitmq.password)
_parameters = pika.ConnectionParameters(
    host=_config.rabbitmq.host,
    credentials=_credentials,
    heartbeat=0,
)
_rabbit_connection = pika.BlockingConnection(_parameters)
_rabbit_channel = _rabbit_connection.channel()

_broker = RabbitMQBroker(_rabbit_channel, _config.rabbitmq)
_broker.setup()


def get_handler() -> TranscriptionHandler:
    """Returns the configured transcription handler."""
    return TranscriptionHandler(
        storage=_storage,
        state_store=_state_store,
        transcription_service=_transcription_service,
        output_bucket=_config.minio.output_bucket,
        presigned_url_ttl_seconds=_config.processing.presigned_url_ttl_seconds,
        stale_in_progress_seconds=_config.processing.stale_in_progress_seconds,
    )


def get_dispatcher() -> EventDispatcher:
    """Returns the configured event dispatcher."""
    return EventDispatcher(get_handler())


def get_worker() -> Worker:
    """Returns the configured worker."""
    return Worker(_broker, get_dispatcher(), _config.rabbitmq)
