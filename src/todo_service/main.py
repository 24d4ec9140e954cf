import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import TodoError
from .logging_config import configure_logging
from .publishers import shutdown_publisher
from .routers import todos as todos_router
from .settings import get_settings
from .utils import error_response, status_for_error

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "CRUD operations for Todo items. Every change is published as an event.",
    },
]

_settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup and flush the event publisher on shutdown."""
    configure_logging(_settings.log_level)
    logger.info(
        "Todo API starting",
        extra={"backend": _settings.persistence_backend, "events": _settings.event_backend},
    )
    yield
    shutdown_publisher()
    logger.info("Todo API stopped")


app = FastAPI(
    title="Todo Backend",
    description="Backend API service for managing todos that publishes a change event for every mutation.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TodoError)
async def todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
    """
    Render service errors as `{"msg": ...}` with the status of their kind.

    Only `msg` is exposed; the wrapped cause stays in the server log.
    """
    return error_response(status_for_error(exc), exc.msg)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Malformed ids and bodies are rejected before reaching the service.

    Response format:
        {"msg": "<location>: <reason>"}
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(part) for part in first.get("loc", ()))
        msg = f"{loc}: {first.get('msg', 'invalid value')}" if loc else str(first.get("msg"))
    else:
        msg = "Request validation failed"
    return error_response(status.HTTP_400_BAD_REQUEST, msg)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error")


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health and the configured backends.
    """
    return {
        "message": "Healthy",
        "backend": _settings.persistence_backend,
        "events": _settings.event_backend,
    }


# Include routers
app.include_router(todos_router.router)


# PUBLIC_INTERFACE
def run() -> None:
    """Serve the API with uvicorn on HTTP_HOST:HTTP_PORT."""
    import uvicorn

    configure_logging(_settings.log_level)
    uvicorn.run(app, host=_settings.http_host, port=_settings.http_port)


if __name__ == "__main__":
    run()
