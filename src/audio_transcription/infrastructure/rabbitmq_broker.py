"""RabbitMQ message broker implementation."""

from collections.abc import Callable
from typing import Any

from pika.channel import Channel

from audio_transcription.config import QueueConfig, RabbitMQConfig
from audio_transcription.logging import setup_logging

from .interfaces import MessageBroker

logger = setup_logging()


class RabbitMQBroker(MessageBroker):
    """
    Consumes MinIO bucket notifications delivered over AMQP.

    MinIO's AMQP notification target publishes each event to the configured
    exchange with a fixed routing key; ``setup`` binds the transcription
    queue to that key.
    """

    def __init__(self, channel: Channel, config: RabbitMQConfig):
        self._channel = channel
        self._config = config

    def acknowledge(self, delivery_tag: int) -> None:
        """Acknowledges successful processing of a message."""
        self._channel.basic_ack(delivery_tag=delivery_tag)

    def reject(self, delivery_tag: int) -> None:
        """
        Rejects a message with requeue.

        Redelivery is bounded by the quorum queue's x-delivery-limit; once it
        is exhausted the message is dead-lettered to the DLQ.
        """
        self._channel.basic_nack(delivery_tag=delivery_tag, requeue=True)

    def consume(
        self, callback: Callable[[bytes, int, dict[str, Any] | None], None]
    ) -> None:
        """
        Starts consuming messages from the configured queue.

        Args:
            callback: Function called for each message with (body, delivery_tag, headers).
        """

        def on_message(ch, method, properties, body):
            headers = properties.headers if properties else None
            callback(body, method.delivery_tag, headers)

        # One notification batch at a time; files are processed sequentially.
        self._channel.basic_qos(prefetch_count=1)
        self._channel.basic_consume(
            queue=self._config.queue_config.name,
            on_message_callback=on_message,
        )
        logger.info(
            "Started consuming",
            extra={"queue": self._config.queue_config.name},
        )
        self._channel.start_consuming()

    def setup(self) -> None:
        """Sets up exchanges, queues, and bindings for this service."""
        queue_config: QueueConfig = self._config.queue_config

        # Dead letter exchange and queue
        self._channel.exchange_declare(
            exchange=queue_config.dlq_exchange_name,
            exchange_type="direct",
            durable=True,
        )
        self._channel.queue_declare(
            queue=queue_config.dlq_name,
            durable=True,
        )
        self._channel.queue_bind(
            queue=queue_config.dlq_name,
            exchange=queue_config.dlq_exchange_name,
            routing_key=queue_config.dlq_routing_key,
        )

        # Exchange MinIO publishes bucket notifications to
        self._channel.exchange_declare(
            exchange=self._config.exchange_name,
            exchange_type="topic",
            durable=True,
        )

        # Main queue with dead letter configuration
        arguments = {
            "x-queue-type": queue_config.queue_type,
            "x-delivery-limit": queue_config.max_delivery_count,
            "x-dead-letter-exchange": queue_config.dlq_exchange_name,
            "x-dead-letter-routing-key": queue_config.dlq_routing_key,
        }
        self._channel.queue_declare(
            queue=queue_config.name,
            durable=True,
            arguments=arguments,
        )
        self._channel.queue_bind(
            queue=queue_config.name,
            exchange=self._config.exchange_name,
            routing_key=queue_config.expected_routing_key,
        )

        logger.info(
            "Queue infrastructure ready",
            extra={"queue": queue_config.name, "exchange": self._config.exchange_name},
        )
