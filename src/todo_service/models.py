from __future__ import annotations

import json
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict

from .errors import ValidationError

MIN_FIELD_LENGTH = 1
MAX_FIELD_LENGTH = 255


def _check_length(field: str, value: str) -> None:
    if not (MIN_FIELD_LENGTH <= len(value) <= MAX_FIELD_LENGTH):
        raise ValidationError(
            f"{field} should have length between {MIN_FIELD_LENGTH} and {MAX_FIELD_LENGTH} chars"
        )


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Todo:
    """
    The managed resource.

    Fields:
    - id: identifier assigned by the repository on creation (0 before that)
    - title: 1..255 characters, stored verbatim
    - description: 1..255 characters, stored verbatim

    Construction raises ValidationError when a length is out of bounds, so
    an invalid Todo never exists.
    """

    title: str
    description: str
    id: int = 0

    def __post_init__(self) -> None:
        _check_length("title", self.title)
        _check_length("description", self.description)

    def with_id(self, todo_id: int) -> "Todo":
        return replace(self, id=todo_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "description": self.description}


# PUBLIC_INTERFACE
def new_todo(title: str, description: str) -> Todo:
    """
    Build a not-yet-persisted Todo.

    Raises:
        ValidationError: title or description length outside 1..255.
    """
    return Todo(title=title, description=description)


# PUBLIC_INTERFACE
class EventKind(str, Enum):
    """Kind of mutation an Event reports."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Event:
    """
    Notification of a committed change to a Todo.

    For create/update the snapshot is the post-mutation state; for delete it
    is the record as it was before removal.
    """

    kind: EventKind
    todo: Todo

    @classmethod
    def create(cls, todo: Todo) -> "Event":
        return cls(EventKind.CREATE, todo)

    @classmethod
    def update(cls, todo: Todo) -> "Event":
        return cls(EventKind.UPDATE, todo)

    @classmethod
    def delete(cls, todo: Todo) -> "Event":
        return cls(EventKind.DELETE, todo)

    def key(self) -> str:
        """Partition key; one key per todo keeps its events ordered."""
        return str(self.todo.id)

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.kind.value, "todo": self.todo.to_dict()}

    def to_json(self) -> bytes:
        return json.dumps(self.to_dict()).encode("utf-8")
