"""Secret resolver backed by mounted secret files."""

import json
from pathlib import Path

from audio_transcription.exceptions import SecretResolutionError
from audio_transcription.logging import setup_logging

from .interfaces import SecretResolver

logger = setup_logging()

API_KEY_FIELDS = ("api_key", "apiKey", "API_KEY")


class FileSecretResolver(SecretResolver):
    """
    Reads secrets from a directory of files, one file per secret.

    This is the layout Docker and Kubernetes use when mounting secrets
    (``/run/secrets/<name>``). Each secret is read once and cached.
    """

    def __init__(self, secrets_dir: Path):
        self._secrets_dir = Path(secrets_dir)
        self._cache: dict[str, str] = {}

    def get_secret_string(self, secret_name: str) -> str:
        if secret_name in self._cache:
            return self._cache[secret_name]

        if not secret_name or "/" in secret_name or secret_name in (".", ".."):
            raise SecretResolutionError(secret_name, "invalid secret name")

        path = self._secrets_dir / secret_name
        try:
            value = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError as e:
            raise SecretResolutionError(secret_name, "secret not found", e) from e
        except OSError as e:
            logger.exception("Secret read failed", extra={"secret_name": secret_name})
            raise SecretResolutionError(secret_name, "secret unreadable", e) from e

        if not value:
            raise SecretResolutionError(secret_name, "secret has no value")

        logger.info("Secret resolved", extra={"secret_name": secret_name})
        self._cache[secret_name] = value
        return value

    def get_secret_json(self, secret_name: str) -> dict:
        raw = self.get_secret_string(secret_name)
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SecretResolutionError(secret_name, "secret is not valid JSON", e) from e
        if not isinstance(parsed, dict):
            raise SecretResolutionError(secret_name, "secret JSON is not an object")
        return parsed


def resolve_api_key(resolver: SecretResolver, secret_name: str) -> str:
    """
    Resolves an API key stored either as a plain string or as a JSON object.

    JSON secrets must carry the key under one of ``API_KEY_FIELDS``.

    Raises:
        SecretResolutionError: If the secret is missing or holds no key.
    """
    raw = resolver.get_secret_string(secret_name)
    if not raw.lstrip().startswith("{"):
        return raw

    payload = resolver.get_secret_json(secret_name)
    for field in API_KEY_FIELDS:
        value = payload.get(field)
        if isinstance(value, str) and value:
            return value
    raise SecretResolutionError(
        secret_name, f"JSON secret has none of the fields {', '.join(API_KEY_FIELDS)}"
    )
