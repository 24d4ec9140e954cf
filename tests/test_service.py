import pytest

from todo_service.errors import (
    EventPublishError,
    InternalError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from todo_service.models import EventKind, Todo
from todo_service.publishers import InMemoryPublisher
from todo_service.repositories import InMemoryRepository
from todo_service.service import TodoService


class RecordingRepository(InMemoryRepository):
    """In-memory repository that remembers which operations were called."""

    def __init__(self, fail_on=()):
        super().__init__()
        self.calls = []
        self.fail_on = set(fail_on)

    def _record(self, name, arg):
        self.calls.append((name, arg))
        if name in self.fail_on:
            raise StorageError(f"{name} failed")

    def create(self, todo):
        self._record("create", todo)
        return super().create(todo)

    def get_all(self):
        self._record("get_all", None)
        return super().get_all()

    def get_by_id(self, todo_id):
        self._record("get_by_id", todo_id)
        return super().get_by_id(todo_id)

    def update(self, todo):
        self._record("update", todo)
        super().update(todo)

    def delete(self, todo_id):
        self._record("delete", todo_id)
        super().delete(todo_id)


@pytest.fixture
def repo():
    return RecordingRepository()


@pytest.fixture
def publisher():
    return InMemoryPublisher()


@pytest.fixture
def service(repo, publisher):
    return TodoService(repo, publisher)


class TestCreate:
    def test_create_assigns_id_and_publishes(self, service, publisher):
        todo = service.create("Buy milk", "2 liters")
        assert todo == Todo(id=1, title="Buy milk", description="2 liters")
        assert len(publisher.events) == 1
        assert publisher.events[0].kind is EventKind.CREATE
        assert publisher.events[0].todo == todo

    def test_create_then_get_by_id(self, service):
        created = service.create("Read", "a book")
        fetched = service.get_by_id(created.id)
        assert (fetched.title, fetched.description) == ("Read", "a book")

    def test_validation_failure_touches_nothing(self, service, repo, publisher):
        with pytest.raises(ValidationError):
            service.create("", "x")
        assert repo.calls == []
        assert publisher.events == []

    def test_storage_failure_is_internal_and_not_published(self, publisher):
        service = TodoService(RecordingRepository(fail_on={"create"}), publisher)
        with pytest.raises(InternalError) as exc_info:
            service.create("a", "b")
        assert exc_info.value.msg == "failed to create todo"
        assert isinstance(exc_info.value.cause, StorageError)
        assert str(exc_info.value) == "failed to create todo: create failed"
        assert publisher.events == []

    def test_publish_failure_returns_stored_todo(self, service, repo, publisher):
        publisher.fail_with = "broker down"
        with pytest.raises(EventPublishError) as exc_info:
            service.create("a", "b")
        assert exc_info.value.todo == Todo(id=1, title="a", description="b")
        assert repo.get_by_id(1).title == "a"


class TestQueries:
    def test_get_all_empty(self, service):
        assert service.get_all() == []

    def test_get_all_storage_failure(self, publisher):
        service = TodoService(RecordingRepository(fail_on={"get_all"}), publisher)
        with pytest.raises(InternalError):
            service.get_all()

    def test_get_missing_is_not_found(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            service.get_by_id(999)
        assert exc_info.value.todo_id == 999
        assert "999" in exc_info.value.msg

    def test_get_storage_failure_is_internal(self, publisher):
        service = TodoService(RecordingRepository(fail_on={"get_by_id"}), publisher)
        with pytest.raises(InternalError):
            service.get_by_id(1)


class TestUpdate:
    def test_update_calls_repository_then_publishes(self, service, repo, publisher):
        created = service.create("old", "old")
        changed = Todo(id=created.id, title="new", description="new")

        service.update(changed)

        assert ("update", changed) in repo.calls
        assert service.get_by_id(created.id) == changed
        assert publisher.events[-1].kind is EventKind.UPDATE
        assert publisher.events[-1].todo == changed

    def test_update_storage_failure(self, publisher):
        repo = RecordingRepository(fail_on={"update"})
        service = TodoService(repo, publisher)
        with pytest.raises(InternalError) as exc_info:
            service.update(Todo(id=1, title="a", description="b"))
        assert exc_info.value.msg == "failed to update todo"
        assert publisher.events == []

    def test_update_publish_failure(self, service, publisher):
        created = service.create("a", "b")
        publisher.fail_with = "broker down"
        with pytest.raises(EventPublishError):
            service.update(Todo(id=created.id, title="c", description="d"))
        assert service.get_by_id(created.id).title == "c"


class TestDelete:
    def test_delete_then_get_is_not_found(self, service, repo, publisher):
        created = service.create("a", "b")

        service.delete(created)

        assert ("delete", created.id) in repo.calls
        assert publisher.events[-1].to_dict() == {
            "event": "delete",
            "todo": {"id": created.id, "title": "a", "description": "b"},
        }
        with pytest.raises(NotFoundError):
            service.get_by_id(created.id)

    def test_delete_storage_failure(self, publisher):
        service = TodoService(RecordingRepository(fail_on={"delete"}), publisher)
        with pytest.raises(InternalError):
            service.delete(Todo(id=1, title="a", description="b"))
        assert publisher.events == []

    def test_each_mutation_publishes_once(self, service, publisher):
        todo = service.create("a", "b")
        service.update(Todo(id=todo.id, title="c", description="d"))
        service.delete(todo)
        assert [e.kind for e in publisher.events] == [
            EventKind.CREATE,
            EventKind.UPDATE,
            EventKind.DELETE,
        ]


class TestInvalidTodo:
    def test_invalid_update_never_reaches_store_or_publisher(self, service, repo, publisher):
        created = service.create("a", "b")
        repo.calls.clear()

        with pytest.raises(ValidationError):
            service.update(Todo(id=created.id, title="", description="x" * 300))

        assert repo.calls == []
        assert service.get_by_id(created.id) == created
        assert [e.kind for e in publisher.events] == [EventKind.CREATE]
