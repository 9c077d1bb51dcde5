"""Worker that handles queue message consumption and orchestration."""

import json
from typing import Any

from pydantic import ValidationError

from audio_transcription.config import RabbitMQConfig
from audio_transcription.domain import StorageEvent
from audio_transcription.handlers import EventDispatcher, notifications_from_event
from audio_transcription.infrastructure.interfaces import MessageBroker
from audio_transcription.logging import setup_logging

logger = setup_logging()


class Worker:
    """Consumes bucket notifications from the queue and dispatches them."""

    def __init__(
        self,
        broker: MessageBroker,
        dispatcher: EventDispatcher,
        config: RabbitMQConfig,
    ):
        self._broker = broker
        self._dispatcher = dispatcher
        self._config = config

    def start(self) -> None:
        """Starts consuming messages from the queue."""
        logger.info("Worker initialized, starting message consumption")
        self._broker.consume(self._on_message)

    def _on_message(
        self, body: bytes, delivery_tag: int, headers: dict[str, Any] | None
    ) -> None:
        """Callback for each received message."""
        delivery_count = headers.get("x-delivery-count", 1) if headers else 1

        logger.info(
            "Message received",
            extra={
                "attempt": delivery_count,
                "max_attempts": self._config.queue_config.max_delivery_count,
            },
        )

        try:
            event = StorageEvent.model_validate(json.loads(body))
        except (ValidationError, ValueError) as e:
            logger.exception("Invalid message format", extra={"error": str(e)})
            self._broker.reject(delivery_tag)
            return

        summary = self._dispatcher.dispatch(notifications_from_event(event))
        self._broker.acknowledge(delivery_tag)

        logger.info(
            "Message processed",
            extra={"event_name": event.event_name, **summary.model_dump()},
        )
