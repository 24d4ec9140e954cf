from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import Todo


# PUBLIC_INTERFACE
class ErrorKind(str, Enum):
    """Classification of failures surfaced by the todo service."""

    VALIDATION = "validation"
    INTERNAL = "internal"
    EVENT_PUBLISH = "event_publish"
    NOT_FOUND = "not_found"


# PUBLIC_INTERFACE
class TodoError(Exception):
    """
    Base error raised by the todo service.

    Attributes:
    - kind: ErrorKind used by the API layer to pick a response status
    - msg: human readable message, safe to show to API callers
    - cause: optional underlying exception
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, msg: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(msg)
        self.msg = msg
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.msg}: {self.cause}"
        return self.msg


class ValidationError(TodoError):
    kind = ErrorKind.VALIDATION


class NotFoundError(TodoError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, todo_id: int, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"todo with id {todo_id} is not found", cause)
        self.todo_id = todo_id


class EventPublishError(TodoError):
    """The record was persisted but its change event could not be sent."""

    kind = ErrorKind.EVENT_PUBLISH

    def __init__(self, msg: str, todo: "Todo", cause: Optional[BaseException] = None) -> None:
        super().__init__(msg, cause)
        self.todo = todo


class InternalError(TodoError):
    kind = ErrorKind.INTERNAL


# Raised by storage and transport adapters; the service translates them.


class StorageError(Exception):
    """Any failure of a persistence backend."""


class RecordNotFoundError(LookupError):
    """No row exists for the requested identifier."""

    def __init__(self, todo_id: int) -> None:
        super().__init__(f"no todo row with id {todo_id}")
        self.todo_id = todo_id


class PublishError(Exception):
    """The event transport refused or failed to deliver a message."""
