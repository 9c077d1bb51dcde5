"""Infrastructure interface exports."""

from .message_broker import MessageBroker
from .secret_store import SecretResolver
from .state_store import TranscriptionStateStore
from .storage import StorageClient
from .transcription_service import TranscriptionService

__all__ = [
    "MessageBroker",
    "SecretResolver",
    "StorageClient",
    "TranscriptionStateStore",
    "TranscriptionService",
]
