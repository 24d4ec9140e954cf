from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, List

from .errors import RecordNotFoundError, StorageError
from .models import Todo
from .repositories import Repository


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    title: str = "title"
    description: str = "description"


_COLS = _Cols()


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.

    A connection is opened per call so the repository can be shared by the
    request threads of the API server.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as e:
            raise StorageError(f"cannot open {self._db_path}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(str(e)) from e
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} TEXT,
                    {_COLS.description} TEXT
                )
                """
            )

    def _row_to_todo(self, row: sqlite3.Row) -> Todo:
        return Todo(
            id=int(row[_COLS.id]),
            title=str(row[_COLS.title]),
            description=str(row[_COLS.description]),
        )

    def create(self, todo: Todo) -> int:
        with self._conn() as conn:
            cur = conn.execute(
                f"INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.description}) VALUES (?, ?)",
                (todo.title, todo.description),
            )
            return int(cur.lastrowid)

    def get_all(self) -> List[Todo]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_COLS.table}").fetchall()
            return [self._row_to_todo(r) for r in rows]

    def get_by_id(self, todo_id: int) -> Todo:
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,)
            ).fetchone()
        if row is None:
            raise RecordNotFoundError(todo_id)
        return self._row_to_todo(row)

    def update(self, todo: Todo) -> None:
        with self._conn() as conn:
            conn.execute(
                f"UPDATE {_COLS.table} SET {_COLS.title} = ?, {_COLS.description} = ? WHERE {_COLS.id} = ?",
                (todo.title, todo.description, todo.id),
            )

    def delete(self, todo_id: int) -> None:
        with self._conn() as conn:
            conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,))
