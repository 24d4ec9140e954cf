from todo_service.errors import ErrorKind, EventPublishError, NotFoundError, TodoError, ValidationError
from todo_service.models import Todo
from todo_service.settings import get_settings
from todo_service.utils import status_for_error


def test_defaults(monkeypatch):
    for name in (
        "PERSISTENCE_BACKEND",
        "EVENT_BACKEND",
        "KAFKA_BROKERS",
        "TODO_TOPIC",
        "KAFKA_GROUP_ID",
        "KAFKA_PUBLISH_TIMEOUT",
        "HTTP_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    settings = get_settings()
    assert settings.persistence_backend == "memory"
    assert settings.event_backend == "memory"
    assert settings.kafka_brokers == ["localhost:9092"]
    assert settings.todo_topic == "todos"
    assert settings.kafka_group_id == "todo-consumer"
    assert settings.kafka_publish_timeout == 5.0
    assert settings.http_port == 8000


def test_overrides_and_fallbacks(monkeypatch):
    monkeypatch.setenv("PERSISTENCE_BACKEND", "SQLite")
    monkeypatch.setenv("EVENT_BACKEND", "rabbit")
    monkeypatch.setenv("KAFKA_BROKERS", "a:9092, b:9092,")
    monkeypatch.setenv("KAFKA_PUBLISH_TIMEOUT", "soon")
    settings = get_settings()
    assert settings.persistence_backend == "sqlite"
    assert settings.event_backend == "memory"
    assert settings.kafka_brokers == ["a:9092", "b:9092"]
    assert settings.kafka_publish_timeout == 5.0


class _UnmappedError(TodoError):
    kind = "something-else"


def test_status_mapping():
    assert status_for_error(ValidationError("bad")) == 400
    assert status_for_error(NotFoundError(3)) == 404
    assert status_for_error(EventPublishError("x", Todo("a", "b", 1))) == 500
    assert status_for_error(TodoError("x")) == 500
    assert TodoError("x").kind is ErrorKind.INTERNAL
    assert status_for_error(_UnmappedError("x")) == 500
