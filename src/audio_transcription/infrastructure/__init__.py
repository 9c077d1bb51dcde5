"""Infrastructure layer exports."""

from .file_secret_store import FileSecretResolver, resolve_api_key
from .http_transcriber import HTTPTranscriptionClient
from .minio_storage import MinioStorageClient
from .rabbitmq_broker import RabbitMQBroker
from .sql_state_store import SQLTranscriptionStore

__all__ = [
    "FileSecretResolver",
    "HTTPTranscriptionClient",
    "MinioStorageClient",
    "RabbitMQBroker",
    "SQLTranscriptionStore",
    "resolve_api_key",
]
