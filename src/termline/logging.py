"""Logging for termline.

Thin layer over the standard library ``logging`` package:

- ``JSONFormatter`` / ``HumanFormatter`` for machine and terminal output
- ``StructuredLogger``: keyword arguments become record attributes
- ``configure_logging()``: one handler on the ``termline`` logger
- ``get_logger()``: the logger every termline module uses

Example:
    >>> from termline.logging import configure_logging, get_logger
    >>> configure_logging(level="INFO", format="json")
    >>> log = get_logger("termline.shell")
    >>> log.info("Prepared command", dialect="bash")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, Literal

__all__ = [
    "JSONFormatter",
    "HumanFormatter",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]

ROOT_LOGGER_NAME = "termline"

# Attributes present on every LogRecord; anything else came from ``extra``.
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


class JSONFormatter(logging.Formatter):
    """Format records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                data[key] = value

        if record.levelno >= logging.ERROR:
            data["location"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, default=str)


class HumanFormatter(logging.Formatter):
    """Compact terminal format: ``12:00:00 WARNING termline.shell: message``."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )


class StructuredLogger:
    """Logger wrapper that accepts context as keyword arguments.

    ``log.warning("Unknown shell", executable="fish")`` attaches
    ``executable`` to the record, which ``JSONFormatter`` emits as a field.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._logger = logging.getLogger(name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def child(self, suffix: str) -> StructuredLogger:
        return StructuredLogger(f"{self.name}.{suffix}")

    def _log(self, level: int, msg: str, exc_info: Any = None, **context: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, msg, exc_info=exc_info, extra=context or None)

    def debug(self, msg: str, **context: Any) -> None:
        self._log(logging.DEBUG, msg, **context)

    def info(self, msg: str, **context: Any) -> None:
        self._log(logging.INFO, msg, **context)

    def warning(self, msg: str, **context: Any) -> None:
        self._log(logging.WARNING, msg, **context)

    def error(self, msg: str, **context: Any) -> None:
        self._log(logging.ERROR, msg, **context)

    def exception(self, msg: str, **context: Any) -> None:
        self._log(logging.ERROR, msg, exc_info=True, **context)


def configure_logging(
    level: str | int | None = None,
    format: Literal["human", "json"] | None = None,
) -> None:
    """Install a single stream handler on the ``termline`` logger.

    Records stop propagating to the root logger so they are emitted once.

    Args:
        level: Log level name or number. Defaults to ``TERMLINE_LOG_LEVEL``.
        format: ``"human"`` or ``"json"``. Defaults to ``TERMLINE_LOG_FORMAT``.
    """
    from termline.settings import get_settings

    settings = get_settings()
    level = level if level is not None else settings.log_level
    format = format or settings.log_format

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if format == "json" else HumanFormatter())

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def get_logger(name: str) -> StructuredLogger:
    """Return a StructuredLogger for ``name``."""
    return StructuredLogger(name)
