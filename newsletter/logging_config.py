"""Logging configuration for the newsletter package.

Provides a JSON formatted logger named ``newsletter``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOG_NAME = "newsletter"
LOG_FILE = Path("logs/newsletter.log")
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 5
STREAM_HANDLER_NAME = "newsletter.stream"
FILE_HANDLER_NAME = "newsletter.file"

# Context fields of the data source, migration and sweep records, kept at top level
PROMOTED_FIELDS = ("pool", "version", "cutoff")

# Attributes present on every LogRecord. Anything else is considered an extra field.
DEFAULT_LOG_RECORD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "asctime",
}


class JsonFormatter(logging.Formatter):
    """Formatter returning log records as JSON strings."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - short description
        base: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in DEFAULT_LOG_RECORD_ATTRS
        }
        for key in PROMOTED_FIELDS:
            value = extras.pop(key, None)
            if value is not None:
                base[key] = value
        if extras:
            base["extra"] = extras
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)


def get_logger() -> logging.Logger:
    """Return a configured logger for the project."""
    logger = logging.getLogger(LOG_NAME)
    # Handlers added by others (e.g. log capture in tests) do not count
    own = {handler.get_name() for handler in logger.handlers}
    if {STREAM_HANDLER_NAME, FILE_HANDLER_NAME} <= own:
        return logger
    for handler in logger.handlers[:]:
        if handler.get_name() in (STREAM_HANDLER_NAME, FILE_HANDLER_NAME):
            logger.removeHandler(handler)
            handler.close()

    logger.setLevel(logging.DEBUG)

    formatter = JsonFormatter()

    stream_handler = logging.StreamHandler()
    stream_handler.set_name(STREAM_HANDLER_NAME)
    stream_handler.setLevel(logging.DEBUG)
    stream_handler.setFormatter(formatter)

    LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        LOG_FILE,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.set_name(FILE_HANDLER_NAME)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    logger.addHandler(stream_handler)
    logger.addHandler(file_handler)
    logger.propagate = False
    return logger
