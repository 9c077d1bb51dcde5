"""HTTP implementation of the TranscriptionService interface."""

from __future__ import annotations

from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from audio_transcription.domain.models import TranscriptionResponse
from audio_transcription.exceptions import TranscriptionError
from audio_transcription.logging import setup_logging

from .file_secret_store import resolve_api_key
from .interfaces import SecretResolver, TranscriptionService

logger = setup_logging()

DEFAULT_BASE_URL = "https://api.elevenlabs.io/v1"


class HTTPTranscriptionClient(TranscriptionService):
    """Client for a JSON speech-to-text API that fetches audio by URL."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        parsed = urlparse(base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("base_url must include scheme and host")
        if not api_key:
            raise ValueError("api_key must not be empty")

        self._api_key = api_key
        self._endpoint = f"{base_url.rstrip('/')}/transcribe"
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    @classmethod
    def from_secret(
        cls,
        resolver: SecretResolver,
        secret_name: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> HTTPTranscriptionClient:
        """Builds a client whose API key is resolved from the secret store."""
        api_key = resolve_api_key(resolver, secret_name)
        return cls(api_key, base_url=base_url, timeout=timeout, http_client=http_client)

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def transcribe_audio(self, audio_url: str) -> TranscriptionResponse:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self._client.post(
                self._endpoint, json={"audio_url": audio_url}, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.exception("Transcription request failed")
            raise TranscriptionError(
                f"failed to send request to transcription API: {exc}", cause=exc
            ) from exc

        if response.status_code != httpx.codes.OK:
            raise TranscriptionError(
                "transcription API returned non-200 status code: "
                f"{response.status_code}, body: {response.text}",
                status_code=response.status_code,
            )

        try:
            result = TranscriptionResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TranscriptionError(
                f"failed to decode transcription API response: {exc}", cause=exc
            ) from exc

        if not result.success:
            raise TranscriptionError(
                f"transcription API returned error: {result.error or 'unknown error'}"
            )

        logger.info(
            "Audio transcription successful",
            extra={"transcription_id": result.id, "text_length": len(result.text)},
        )
        return result

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HTTPTranscriptionClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
