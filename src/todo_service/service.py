"""Todo use cases.

Each mutating use case writes to the repository first and only then
publishes the matching event. A failed publish is reported to the caller
but the write is kept; there is no rollback and no retry.
"""

from __future__ import annotations

import logging
from typing import List

from .errors import (
    EventPublishError,
    InternalError,
    NotFoundError,
    PublishError,
    RecordNotFoundError,
    StorageError,
)
from .models import Event, Todo, new_todo
from .publishers import Publisher
from .repositories import Repository

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TodoService:
    """Validates, persists and announces changes to todos. Holds no per-call state."""

    def __init__(self, repository: Repository, publisher: Publisher) -> None:
        self.repository = repository
        self.publisher = publisher

    def create(self, title: str, description: str) -> Todo:
        """
        Create a todo and publish a `create` event.

        Raises:
            ValidationError: title/description out of bounds; nothing is stored.
            InternalError: the repository failed; no event is published.
            EventPublishError: stored, but the event could not be sent. The
                stored todo is available as `err.todo`.
        """
        todo = new_todo(title, description)

        try:
            todo_id = self.repository.create(todo)
        except StorageError as e:
            logger.error("Failed to create todo", extra={"error": str(e)})
            raise InternalError("failed to create todo", e) from e

        todo = todo.with_id(todo_id)
        self._publish(Event.create(todo))
        logger.info("Todo created", extra={"todo_id": todo.id})
        return todo

    def get_all(self) -> List[Todo]:
        try:
            return self.repository.get_all()
        except StorageError as e:
            logger.error("Failed to list todos", extra={"error": str(e)})
            raise InternalError("failed to get all todos", e) from e

    def get_by_id(self, todo_id: int) -> Todo:
        """
        Raises:
            NotFoundError: no todo has this id.
            InternalError: the repository failed.
        """
        try:
            return self.repository.get_by_id(todo_id)
        except RecordNotFoundError as e:
            raise NotFoundError(todo_id, e) from e
        except StorageError as e:
            logger.error("Failed to get todo", extra={"todo_id": todo_id, "error": str(e)})
            raise InternalError("failed to get todo by id", e) from e

    def update(self, todo: Todo) -> None:
        """Persist new title/description of `todo` and publish an `update` event."""
        try:
            self.repository.update(todo)
        except StorageError as e:
            logger.error("Failed to update todo", extra={"todo_id": todo.id, "error": str(e)})
            raise InternalError("failed to update todo", e) from e

        self._publish(Event.update(todo))
        logger.info("Todo updated", extra={"todo_id": todo.id})

    def delete(self, todo: Todo) -> None:
        """Remove `todo` and publish a `delete` event carrying its last state."""
        try:
            self.repository.delete(todo.id)
        except StorageError as e:
            logger.error("Failed to delete todo", extra={"todo_id": todo.id, "error": str(e)})
            raise InternalError("failed to delete todo", e) from e

        self._publish(Event.delete(todo))
        logger.info("Todo deleted", extra={"todo_id": todo.id})

    def _publish(self, event: Event) -> None:
        try:
            self.publisher.publish(event)
        except PublishError as e:
            logger.error(
                "Failed to publish event",
                extra={"event": event.kind.value, "todo_id": event.todo.id, "error": str(e)},
            )
            raise EventPublishError("failed to publish event", event.todo, e) from e
