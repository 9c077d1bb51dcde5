"""Abstract interface for consuming storage notifications from a broker."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any


class MessageBroker(ABC):
    """Abstract base class for message consumption."""

    @abstractmethod
    def acknowledge(self, delivery_tag: int) -> None:
        """
        Acknowledges successful processing of a message.

        Args:
            delivery_tag: The message delivery tag.
        """

    @abstractmethod
    def reject(self, delivery_tag: int) -> None:
        """
        Rejects a message, triggering redelivery or dead-lettering.

        Args:
            delivery_tag: The message delivery tag.
        """

    @abstractmethod
    def consume(
        self, callback: Callable[[bytes, int, dict[str, Any] | None], None]
    ) -> None:
        """
        Starts consuming messages from the configured queue.

        Args:
            callback: Function called for each message with (body, delivery_tag, headers).
        """

    @abstractmethod
    def setup(self) -> None:
        """Sets up the required infrastructure (exchanges, queues, bindings)."""
