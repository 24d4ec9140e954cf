"""Kafka transport for todo change events.

Each event is produced with the todo id as message key, so every event of
one todo lands on the same partition and is read back in order.

`publish` waits for the delivery report of its own message by polling the
producer: the HTTP request that triggered the change returns only once the
broker acknowledged the event, or fails with PublishError after `timeout`
seconds. Any request thread may serve another thread's delivery report.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, List, Optional

from confluent_kafka import KafkaError, KafkaException, Producer

from .errors import PublishError
from .models import Event
from .publishers import Publisher

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 0.1


def create_producer(brokers: List[str]) -> Producer:
    """Create and configure a Confluent Kafka Producer."""
    conf: dict[str, Any] = {
        "bootstrap.servers": ",".join(brokers),
        "enable.idempotence": True,
    }
    return Producer(conf)


class KafkaPublisher(Publisher):
    """Publisher writing JSON events to a single Kafka topic."""

    def __init__(self, producer: Producer, topic: str, timeout: float = 5.0) -> None:
        self._producer = producer
        self._topic = topic
        self._timeout = timeout

    def publish(self, event: Event) -> None:
        delivered = threading.Event()
        delivery: dict[str, Optional[KafkaError]] = {}

        def _on_delivery(err, msg) -> None:
            # may run on any thread polling this producer
            delivery["error"] = err
            delivered.set()
            if err is None:
                logger.debug(
                    "Event delivered",
                    extra={
                        "topic": msg.topic(),
                        "partition": msg.partition(),
                        "offset": msg.offset(),
                    },
                )

        deadline = time.monotonic() + self._timeout
        try:
            self._producer.produce(
                topic=self._topic,
                key=event.key().encode("utf-8"),
                value=event.to_json(),
                callback=_on_delivery,
            )
            while not delivered.is_set():
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self._producer.poll(min(remaining, POLL_INTERVAL_SECONDS))
        except (BufferError, KafkaException) as e:
            raise PublishError(f"failed to produce {event.kind.value} event") from e

        if not delivered.is_set():
            raise PublishError(f"{event.kind.value} event not acknowledged within {self._timeout}s")
        if delivery["error"] is not None:
            raise PublishError(str(delivery["error"]))

        logger.info(
            "Event published",
            extra={"event": event.kind.value, "todo_id": event.todo.id, "topic": self._topic},
        )

    def close(self) -> None:
        remaining = self._producer.flush(self._timeout)
        if remaining > 0:
            logger.warning("Producer closed with undelivered messages", extra={"pending": remaining})
