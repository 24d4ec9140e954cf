import sqlite3

import pytest

from todo_service.db import SQLiteRepository
from todo_service.errors import RecordNotFoundError, StorageError
from todo_service.models import Todo, new_todo


@pytest.fixture
def repo(tmp_path):
    return SQLiteRepository(str(tmp_path / "data" / "todos.db"))


def test_schema_created(tmp_path):
    path = tmp_path / "todos.db"
    SQLiteRepository(str(path))
    conn = sqlite3.connect(str(path))
    try:
        cols = [row[1] for row in conn.execute("PRAGMA table_info(todos)")]
    finally:
        conn.close()
    assert cols == ["id", "title", "description"]


def test_create_assigns_increasing_ids(repo):
    first = repo.create(new_todo("a", "b"))
    second = repo.create(new_todo("c", "d"))
    assert first == 1
    assert second == 2


def test_get_by_id(repo):
    todo_id = repo.create(new_todo("Buy milk", "2 liters"))
    assert repo.get_by_id(todo_id) == Todo(id=todo_id, title="Buy milk", description="2 liters")


def test_get_missing_raises(repo):
    with pytest.raises(RecordNotFoundError) as exc_info:
        repo.get_by_id(999)
    assert exc_info.value.todo_id == 999


def test_get_all_empty(repo):
    assert repo.get_all() == []


def test_update_and_delete(repo):
    todo_id = repo.create(new_todo("a", "b"))
    repo.update(Todo(id=todo_id, title="x", description="y"))
    assert repo.get_by_id(todo_id).title == "x"

    repo.delete(todo_id)
    assert repo.get_all() == []
    with pytest.raises(RecordNotFoundError):
        repo.get_by_id(todo_id)


def test_ids_not_reused_after_delete(repo):
    todo_id = repo.create(new_todo("a", "b"))
    repo.delete(todo_id)
    assert repo.create(new_todo("c", "d")) == todo_id + 1


def test_sqlite_errors_become_storage_errors(repo, tmp_path):
    conn = sqlite3.connect(repo._db_path)
    conn.execute("DROP TABLE todos")
    conn.commit()
    conn.close()
    with pytest.raises(StorageError):
        repo.get_all()
