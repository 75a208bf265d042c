"""RabbitMQ implementation of the MessagePublisher interface."""

import json
import logging
import threading

from pika.adapters.blocking_connection import BlockingChannel

from lecture_transcriber.exceptions import EventPublishError
from lecture_transcriber.interfaces import MessagePublisher

logger = logging.getLogger(__name__)


class RabbitMQPublisher(MessagePublisher):
    """
    Publishes events to a RabbitMQ exchange.

    The API serves requests from a thread pool and a pika channel is not
    thread-safe, so publishes are serialized.
    """

    def __init__(self, channel: BlockingChannel, exchange_name: str):
        self._channel = channel
        self._exchange_name = exchange_name
        self._lock = threading.Lock()

    def publish(self, routing_key: str, payload: dict) -> None:
        try:
            with self._lock:
                self._channel.basic_publish(
                    exchange=self._exchange_name,
                    routing_key=routing_key,
                    body=json.dumps(payload),
                )
            logger.info(
                "Event published to RabbitMQ",
                extra={"exchange": self._exchange_name, "routing_key": routing_key},
            )
        except Exception as e:
            logger.exception("RabbitMQ publish failed", extra={"routing_key": routing_key})
            raise EventPublishError(routing_key, e) from e
