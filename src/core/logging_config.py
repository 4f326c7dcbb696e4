"""Structured logging configuration.

vconfig loggers render ISO-timestamped JSON events to stderr through their
own structlog pipeline, so importing the library never changes the host
application's structlog configuration. The minimum level is read from
``VCONFIG_LOG_LEVEL`` when an event is emitted, unless an entry point sets
it explicitly with ``configure_logging``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from core.config import parse_log_level
from core.constants import DEFAULT_LOG_LEVEL, ENV_LOG_LEVEL

_level_override: str | None = None


def configure_logging(level_name: str | None) -> None:
    """Set the minimum level for vconfig events.

    Args:
        level_name: Standard level name such as ``"INFO"``, or None to
            follow ``VCONFIG_LOG_LEVEL`` again.

    Raises:
        VConfigConfigError: If the level name is not supported.
    """
    global _level_override
    _level_override = parse_log_level(level_name) if level_name is not None else None


def current_log_level() -> str:
    """Return the level vconfig events are currently filtered at."""
    if _level_override is not None:
        return _level_override
    return parse_log_level(os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL))


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A logger accepting structured keyword fields.
    """
    return _VConfigLogger(name)


class _VConfigLogger:
    """Structured logger that resolves its level and stream per event."""

    def __init__(self, name: str) -> None:
        self._name = name

    def debug(self, event: str, **fields: object) -> None:
        """Log a debug-level structured event."""
        self._bind().debug(event, **fields)

    def info(self, event: str, **fields: object) -> None:
        """Log an info-level structured event."""
        self._bind().info(event, **fields)

    def warning(self, event: str, **fields: object) -> None:
        """Log a warning-level structured event."""
        self._bind().warning(event, **fields)

    def error(self, event: str, **fields: object) -> None:
        """Log an error-level structured event."""
        self._bind().error(event, **fields)

    def _bind(self) -> Any:
        return structlog.wrap_logger(
            structlog.PrintLogger(sys.stderr),
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelName(current_log_level())
            ),
            logger_name=self._name,
        )
