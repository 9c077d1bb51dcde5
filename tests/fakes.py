"""In-memory collaborators for handler and dispatcher tests."""

from __future__ import annotations

from datetime import datetime

from audio_transcription.domain import TranscriptionResponse
from audio_transcription.exceptions import (
    PresignedURLError,
    StorageUploadError,
    TranscriptionError,
)
from audio_transcription.infrastructure.interfaces import (
    StorageClient,
    TranscriptionService,
)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeStorage(StorageClient):
    def __init__(self, presign_error: Exception | None = None, upload_error: Exception | None = None):
        self.presign_error = presign_error
        self.upload_error = upload_error
        self.presign_calls: list[tuple[str, str, int]] = []
        self.uploads: dict[tuple[str, str], str] = {}

    def generate_presigned_url(self, bucket_name, object_name, ttl_seconds):
        self.presign_calls.append((bucket_name, object_name, ttl_seconds))
        if self.presign_error is not None:
            raise PresignedURLError(object_name, self.presign_error)
        return f"https://minio.local/{bucket_name}/{object_name}?X-Amz-Expires={ttl_seconds}"

    def upload_text(self, bucket_name, object_name, content):
        if self.upload_error is not None:
            raise StorageUploadError(object_name, self.upload_error)
        self.uploads[(bucket_name, object_name)] = content

    def ensure_bucket_exists(self, bucket_name):
        pass

    @property
    def call_count(self) -> int:
        return len(self.presign_calls) + len(self.uploads)


class FakeTranscriptionService(TranscriptionService):
    def __init__(self, text: str = "hello world", error: str | None = None, on_call=None):
        self.text = text
        self.error = error
        self.on_call = on_call
        self.calls: list[str] = []

    def transcribe_audio(self, audio_url):
        self.calls.append(audio_url)
        if self.on_call is not None:
            self.on_call(audio_url)
        if self.error is not None:
            raise TranscriptionError(f"transcription API returned error: {self.error}")
        return TranscriptionResponse(id="tr-1", text=self.text, success=True)

