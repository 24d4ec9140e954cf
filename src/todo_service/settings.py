from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/todos.db'
    - EVENT_BACKEND: 'memory' (default) or 'kafka'
    - KAFKA_BROKERS: comma-separated broker addresses. Default 'localhost:9092'
    - TODO_TOPIC: topic receiving todo change events. Default 'todos'
    - KAFKA_GROUP_ID: consumer group of the event consumer. Default 'todo-consumer'
    - KAFKA_PUBLISH_TIMEOUT: seconds to wait for a publish acknowledgement. Default 5
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: logging level name. Default 'INFO'
    - HTTP_HOST / HTTP_PORT: bind address of the API server. Default 0.0.0.0:8000
    """

    persistence_backend: str
    sqlite_db_path: str
    event_backend: str
    kafka_brokers: List[str]
    todo_topic: str
    kafka_group_id: str
    kafka_publish_timeout: float
    cors_allow_origins: List[str]
    log_level: str
    http_host: str
    http_port: int


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_float(value: str, default: float) -> float:
    try:
        return float(value)
    except ValueError:
        return default


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        return default


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return _parse_list(value)


def _choice(value: str, allowed: set, default: str) -> str:
    v = value.strip().lower()
    return v if v in allowed else default


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    return Settings(
        persistence_backend=_choice(_get_env("PERSISTENCE_BACKEND", "memory"), {"memory", "sqlite"}, "memory"),
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/todos.db").strip(),
        event_backend=_choice(_get_env("EVENT_BACKEND", "memory"), {"memory", "kafka"}, "memory"),
        kafka_brokers=_parse_list(_get_env("KAFKA_BROKERS", "localhost:9092")),
        todo_topic=_get_env("TODO_TOPIC", "todos").strip(),
        kafka_group_id=_get_env("KAFKA_GROUP_ID", "todo-consumer").strip(),
        kafka_publish_timeout=_parse_float(_get_env("KAFKA_PUBLISH_TIMEOUT", "5"), 5.0),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        http_host=_get_env("HTTP_HOST", "0.0.0.0").strip(),
        http_port=_parse_int(_get_env("HTTP_PORT", "8000"), 8000),
    )
