from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..models import new_todo
from ..publishers import Publisher, get_publisher
from ..repositories import Repository, get_repository
from ..schemas import ErrorOut, TodoIn, TodoOut
from ..service import TodoService

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_ERRORS = {
    400: {"model": ErrorOut, "description": "Malformed id or invalid todo fields"},
    404: {"model": ErrorOut, "description": "Todo not found"},
    500: {"model": ErrorOut, "description": "Storage or event publishing failure"},
}


def _errors(*codes: int) -> dict:
    return {code: _ERRORS[code] for code in codes}


def get_todo_service(
    repo: Repository = Depends(get_repository),
    publisher: Publisher = Depends(get_publisher),
) -> TodoService:
    """
    Build the service from the process-wide repository and publisher.
    """
    return TodoService(repo, publisher)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="Get all todos",
    description="Return every todo. An empty store yields an empty list.",
    responses=_errors(500),
)
def list_todos(service: TodoService = Depends(get_todo_service)) -> List[TodoOut]:
    return [TodoOut.from_todo(t) for t in service.get_all()]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create todo",
    description="Create a todo with title and description and publish a `create` event.",
    responses=_errors(400, 500),
)
def create_todo(payload: TodoIn, service: TodoService = Depends(get_todo_service)) -> TodoOut:
    created = service.create(payload.title, payload.description)
    return TodoOut.from_todo(created)


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get todo by ID",
    responses=_errors(400, 404, 500),
)
def get_todo(todo_id: int, service: TodoService = Depends(get_todo_service)) -> TodoOut:
    return TodoOut.from_todo(service.get_by_id(todo_id))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update todo",
    description="Replace title and description of an existing todo and publish an `update` event.",
    responses=_errors(400, 404, 500),
)
def update_todo(
    todo_id: int,
    payload: TodoIn,
    service: TodoService = Depends(get_todo_service),
) -> TodoOut:
    """
    The existing record is fetched first so an unknown id is a 404 before
    anything is written.
    """
    existing = service.get_by_id(todo_id)
    updated = new_todo(payload.title, payload.description).with_id(existing.id)
    service.update(updated)
    return TodoOut.from_todo(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete todo",
    description="Delete a todo by ID and publish a `delete` event with its last state.",
    responses=_errors(400, 404, 500),
)
def delete_todo(todo_id: int, service: TodoService = Depends(get_todo_service)) -> Response:
    existing = service.get_by_id(todo_id)
    service.delete(existing)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
