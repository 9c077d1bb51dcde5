"""Abstract interface for secret retrieval."""

from abc import ABC, abstractmethod


class SecretResolver(ABC):
    @abstractmethod
    def get_secret_string(self, secret_name: str) -> str:
        """
        Returns the raw value of a named secret.

        Raises:
            SecretResolutionError: If the secret is missing or empty.
        """

    @abstractmethod
    def get_secret_json(self, secret_name: str) -> dict:
        """
        Returns a named secret parsed as a JSON object.

        Raises:
            SecretResolutionError: If the secret is missing or not a JSON object.
        """
