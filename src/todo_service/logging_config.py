from __future__ import annotations

import logging
from typing import Union

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter that appends structured `extra=` fields.

    Output: `<asctime> - <name> - <level> - <message> key=value ...`, with
    fields in EXTRA_FIELDS order and absent fields skipped.
    """

    # Fields to extract from LogRecord extras
    EXTRA_FIELDS = [
        # Kafka messages
        "topic",
        "key",
        "value",
        "partition",
        "offset",
        "time",
        "group_id",
        "pending",
        # Todo changes
        "event",
        "todo_id",
        # Startup and failures
        "backend",
        "events",
        "path",
        "error",
    ]

    def __init__(self) -> None:
        super().__init__(fmt=FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = []
        for field in self.EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                fields.append(f"{field}={value}")
        if not fields:
            return line
        # keep a traceback, if any, after the fields
        head, sep, tail = line.partition("\n")
        return f"{head} {' '.join(fields)}{sep}{tail}"


# PUBLIC_INTERFACE
def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure root logging for the API server and the event consumer.

    Args:
        level: logging level number or name (e.g. "DEBUG")
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(ConsoleFormatter())
    logging.basicConfig(level=level, handlers=[handler])

    logging.getLogger("todo_service").setLevel(level)
    logging.getLogger("confluent_kafka").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
