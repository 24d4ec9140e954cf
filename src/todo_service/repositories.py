from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import List, Optional

from .errors import RecordNotFoundError
from .models import Todo
from .settings import get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract repository contract for todo storage backends.

    Implementations raise StorageError for any backend failure.
    """

    @abstractmethod
    def create(self, todo: Todo) -> int:
        """Store a new Todo and return the identifier assigned to it."""

    @abstractmethod
    def get_all(self) -> List[Todo]:
        """Return every stored Todo; an empty list when there are none."""

    @abstractmethod
    def get_by_id(self, todo_id: int) -> Todo:
        """Return a Todo by id. Raise RecordNotFoundError if there is no such row."""

    @abstractmethod
    def update(self, todo: Todo) -> None:
        """Overwrite title and description of the row identified by todo.id."""

    @abstractmethod
    def delete(self, todo_id: int) -> None:
        """Remove the row with the given id."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.

    Update and delete of an unknown id are no-ops, like their SQL counterparts.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, Todo] = {}
        self._next_id = 1

    def create(self, todo: Todo) -> int:
        with self._lock:
            todo_id = self._next_id
            self._next_id += 1
            self._items[todo_id] = todo.with_id(todo_id)
            return todo_id

    def get_all(self) -> List[Todo]:
        with self._lock:
            return list(self._items.values())

    def get_by_id(self, todo_id: int) -> Todo:
        with self._lock:
            item = self._items.get(todo_id)
        if item is None:
            raise RecordNotFoundError(todo_id)
        return item

    def update(self, todo: Todo) -> None:
        with self._lock:
            if todo.id in self._items:
                self._items[todo.id] = todo

    def delete(self, todo_id: int) -> None:
        with self._lock:
            self._items.pop(todo_id, None)


_repository: Optional[Repository] = None
_repository_lock = RLock()


# PUBLIC_INTERFACE
def get_repository() -> Repository:
    """
    Return the process-wide repository, building it on first use from settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository
    """
    global _repository
    with _repository_lock:
        if _repository is None:
            settings = get_settings()
            if settings.persistence_backend == "sqlite":
                from .db import SQLiteRepository

                _repository = SQLiteRepository(settings.sqlite_db_path)
            else:
                _repository = InMemoryRepository()
            logger.info(
                "Repository initialised",
                extra={"backend": settings.persistence_backend},
            )
        return _repository
