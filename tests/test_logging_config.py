# mypy: ignore-errors

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from newsletter.logging_config import (
    FILE_HANDLER_NAME,
    LOG_NAME,
    STREAM_HANDLER_NAME,
    JsonFormatter,
    get_logger,
)


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset logger state."""
    logger = logging.getLogger(LOG_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    yield
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_returns_json_with_extras() -> None:
    record = _record()
    record.pool = "portal"
    record.cutoff = "2024-01-01"
    record.version = "2"
    record.limit_days = 7
    data = json.loads(JsonFormatter().format(record))
    assert data["level"] == "INFO"
    assert data["logger"] == "test"
    assert data["message"] == "hello"
    assert data["pool"] == "portal"
    assert data["cutoff"] == "2024-01-01"
    assert data["version"] == "2"
    assert data["extra"] == {"limit_days": 7}


def test_json_formatter_without_extras() -> None:
    data = json.loads(JsonFormatter().format(_record("plain")))
    assert "extra" not in data
    assert "pool" not in data
    assert "cutoff" not in data


def _own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if h.get_name() in (STREAM_HANDLER_NAME, FILE_HANDLER_NAME)]


def test_get_logger_configures_two_handlers() -> None:
    logger = get_logger()
    own = _own_handlers(logger)
    assert len(own) == 2
    assert any(isinstance(h, RotatingFileHandler) for h in own)
    assert logger.propagate is False
    assert get_logger() is logger
    assert len(_own_handlers(logger)) == 2


def test_get_logger_ignores_foreign_handlers() -> None:
    logger = logging.getLogger(LOG_NAME)
    capture = logging.NullHandler()
    logger.addHandler(capture)

    get_logger()
    assert capture in logger.handlers
    assert sorted(h.get_name() for h in _own_handlers(logger)) == sorted(
        [FILE_HANDLER_NAME, STREAM_HANDLER_NAME]
    )
    assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)

    before = len(logger.handlers)
    get_logger()
    assert len(logger.handlers) == before
