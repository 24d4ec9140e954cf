"""Standalone consumer of todo change events.

Reads the todo topic in an endless loop and logs every message with its
topic, key, value, partition and timestamp. Offsets are committed by the
client's default auto-commit. A read error ends the loop.

Usage:
    python -m todo_service.consumer
    todo-consumer
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from threading import Event
from typing import Any, Optional

from confluent_kafka import TIMESTAMP_NOT_AVAILABLE, Consumer, KafkaException

from .logging_config import configure_logging
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

POLL_TIMEOUT_SECONDS = 1.0


def create_consumer(settings: Settings) -> Consumer:
    """Create and configure a Confluent Kafka Consumer for the todo topic."""
    conf: dict[str, Any] = {
        "bootstrap.servers": ",".join(settings.kafka_brokers),
        "group.id": settings.kafka_group_id,
        "auto.offset.reset": "earliest",
    }
    return Consumer(conf)


def _decode(raw: Optional[bytes]) -> Optional[str]:
    if raw is None:
        return None
    return raw.decode("utf-8", errors="replace")


def _message_time(msg) -> Optional[str]:
    ts_type, ts_ms = msg.timestamp()
    if ts_type == TIMESTAMP_NOT_AVAILABLE:
        return None
    return datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc).isoformat()


class EventConsumer:
    """Polls one topic and logs what it receives."""

    def __init__(self, consumer: Consumer, topic: str) -> None:
        self._consumer = consumer
        self._topic = topic

    def consume(self, stop_event: Optional[Event] = None) -> None:
        """
        Consume until `stop_event` is set.

        Raises:
            KafkaException: the client reported an error for a message.
        """
        self._consumer.subscribe([self._topic])
        try:
            while stop_event is None or not stop_event.is_set():
                msg = self._consumer.poll(POLL_TIMEOUT_SECONDS)
                if msg is None:
                    continue
                if msg.error():
                    raise KafkaException(msg.error())
                self.handle(msg)
        finally:
            self._consumer.close()

    def handle(self, msg) -> None:
        logger.info(
            "Message received",
            extra={
                "topic": msg.topic(),
                "key": _decode(msg.key()),
                "value": _decode(msg.value()),
                "partition": msg.partition(),
                "time": _message_time(msg),
            },
        )


# PUBLIC_INTERFACE
def main() -> int:
    """Entry point of the consumer process. Returns the exit status."""
    settings = get_settings()
    configure_logging(settings.log_level)

    consumer = EventConsumer(create_consumer(settings), settings.todo_topic)
    logger.info(
        "Start consuming messages from kafka",
        extra={"topic": settings.todo_topic, "group_id": settings.kafka_group_id},
    )
    try:
        consumer.consume()
    except KafkaException as e:
        logger.error("Error during reading messages from kafka: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Consumer interrupted")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
