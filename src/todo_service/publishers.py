from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import List, Optional

from .errors import PublishError
from .models import Event
from .settings import get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Publisher(ABC):
    """Abstract contract for emitting todo change events."""

    @abstractmethod
    def publish(self, event: Event) -> None:
        """Send the event downstream. Raise PublishError if it cannot be sent."""

    def close(self) -> None:
        """Release transport resources. Default is a no-op."""


class InMemoryPublisher(Publisher):
    """
    Keeps published events in a list.

    Used as the default when no broker is configured and as a test double;
    set `fail_with` to make every publish raise PublishError.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self.events: List[Event] = []
        self.fail_with: Optional[str] = None

    def publish(self, event: Event) -> None:
        if self.fail_with is not None:
            raise PublishError(self.fail_with)
        with self._lock:
            self.events.append(event)
        logger.debug(
            "Event recorded in memory",
            extra={"event": event.kind.value, "todo_id": event.todo.id},
        )


_publisher: Optional[Publisher] = None
_publisher_lock = RLock()


# PUBLIC_INTERFACE
def get_publisher() -> Publisher:
    """
    Return the process-wide publisher, building it on first use from settings.
    - memory: InMemoryPublisher
    - kafka: KafkaPublisher on TODO_TOPIC
    """
    global _publisher
    with _publisher_lock:
        if _publisher is None:
            settings = get_settings()
            if settings.event_backend == "kafka":
                from .kafka_producer import KafkaPublisher, create_producer

                _publisher = KafkaPublisher(
                    create_producer(settings.kafka_brokers),
                    settings.todo_topic,
                    timeout=settings.kafka_publish_timeout,
                )
            else:
                _publisher = InMemoryPublisher()
            logger.info(
                "Event publisher initialised",
                extra={"backend": settings.event_backend, "topic": settings.todo_topic},
            )
        return _publisher


# PUBLIC_INTERFACE
def shutdown_publisher() -> None:
    """Close the process-wide publisher if one was created."""
    global _publisher
    with _publisher_lock:
        if _publisher is not None:
            _publisher.close()
            _publisher = None
