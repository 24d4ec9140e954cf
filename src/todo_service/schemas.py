from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .models import Todo


# PUBLIC_INTERFACE
class TodoIn(BaseModel):
    """
    Request body for creating or replacing a Todo item.

    Lengths are checked by the domain model, not here, so that bound
    violations come back as the same 400 `{msg}` as any other validation error.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "description": "2 liters",
            }
        }
    )

    title: str = Field(..., description="Short title for the todo item (1..255 chars)")
    description: str = Field(..., description="Description of the todo item (1..255 chars)")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Buy milk",
                "description": "2 liters",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    description: str = Field(..., description="Description of the todo item")

    @classmethod
    def from_todo(cls, todo: Todo) -> "TodoOut":
        return cls(id=todo.id, title=todo.title, description=todo.description)


# PUBLIC_INTERFACE
class ErrorOut(BaseModel):
    """Body of every error response."""

    msg: str = Field(..., description="Human readable error message")
