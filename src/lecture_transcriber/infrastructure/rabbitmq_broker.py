"""RabbitMQ message broker implementation."""

import functools
import logging
from collections.abc import Callable
from typing import Any

from pika.adapters.blocking_connection import BlockingChannel

from lecture_transcriber.config import QueueConfig, RabbitMQConfig
from lecture_transcriber.interfaces import MessageBroker

logger = logging.getLogger(__name__)


class RabbitMQBroker(MessageBroker):
    """
    Message broker implementation using RabbitMQ.

    Jobs run on worker threads while pika's blocking connection lives on the
    consuming thread, so acks and nacks are handed back to the connection with
    ``add_callback_threadsafe``.
    """

    def __init__(self, channel: BlockingChannel, config: RabbitMQConfig, prefetch: int = 1):
        self._channel = channel
        self._config = config
        self._prefetch = prefetch

    def acknowledge(self, delivery_tag: int) -> None:
        self._threadsafe(self._channel.basic_ack, delivery_tag=delivery_tag)

    def reject(self, delivery_tag: int, requeue: bool = True) -> None:
        self._threadsafe(
            self._channel.basic_nack, delivery_tag=delivery_tag, requeue=requeue
        )

    def consume(
        self, callback: Callable[[bytes, int, dict[str, Any] | None], None]
    ) -> None:
        """
        Starts consuming messages from the configured queue. Blocks.

        Args:
            callback: Function called for each message with (body, delivery_tag, headers).
        """

        def on_message(ch, method, properties, body):
            headers = properties.headers if properties else None
            callback(body, method.delivery_tag, headers)

        self._channel.basic_qos(prefetch_count=self._prefetch)
        self._channel.basic_consume(
            queue=self._config.queue_config.name,
            on_message_callback=on_message,
        )
        logger.info(
            "Started consuming",
            extra={"queue": self._config.queue_config.name, "prefetch": self._prefetch},
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
        self._channel.queue_declare(queue=queue_config.dlq_name, durable=True)
        self._channel.queue_bind(
            queue=queue_config.dlq_name,
            exchange=queue_config.dlq_exchange_name,
            routing_key=queue_config.dlq_routing_key,
        )

        self._channel.exchange_declare(
            exchange=self._config.exchange_name,
            exchange_type="topic",
            durable=True,
        )

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

    def _threadsafe(self, fn: Callable, **kwargs) -> None:
        self._channel.connection.add_callback_threadsafe(
            functools.partial(fn, **kwargs)
        )
