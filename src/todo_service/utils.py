from __future__ import annotations

from typing import Dict

from fastapi import status
from fastapi.responses import JSONResponse

from .errors import ErrorKind, TodoError

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.EVENT_PUBLISH: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# PUBLIC_INTERFACE
def status_for_error(err: TodoError) -> int:
    """Map an error kind to its HTTP status; unknown kinds are 500."""
    return STATUS_BY_KIND.get(err.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


# PUBLIC_INTERFACE
def error_response(status_code: int, msg: str) -> JSONResponse:
    """Build the `{"msg": ...}` response shared by every error path."""
    return JSONResponse(status_code=status_code, content={"msg": msg})
