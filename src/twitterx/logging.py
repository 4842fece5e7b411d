"""Structured logging with structlog.

Loggers are built per owner instead of through ``structlog.configure``, so a
client logging at DEBUG and another at ERROR never interfere.

In production:
- JSON lines on stdout for log aggregation

In development:
- Uses structlog's colorized console output
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Literal

import structlog

from twitterx.settings import get_settings

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}
_ALIASES = {"WARN": "WARNING"}


def normalize_level(value: str) -> str:
    """Upper-case a level name and resolve aliases such as ``WARN``.

    Raises:
        ValueError: If the name is not a known level.
    """
    name = value.strip().upper()
    name = _ALIASES.get(name, name)
    if name not in _LEVELS:
        msg = f"Unknown log level: {value!r}"
        raise ValueError(msg)
    return name


def _get_production_processors() -> list[structlog.types.Processor]:
    """Get processors for production: JSON, one event per line."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ]


def _get_dev_processors() -> list[structlog.types.Processor]:
    """Get processors for development environment.

    Uses colorized console output for local debugging.
    """
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.ConsoleRenderer(colors=True),
    ]


def get_logger(name: str, *, level: str | None = None) -> FilteringBoundLogger:
    """Get an independent logger for a module or client instance.

    Args:
        name: Logger name (typically module name like "twitterx.client").
        level: Minimum level to emit. Defaults to the LOG_LEVEL setting, where
            "silent" suppresses everything below CRITICAL.

    Returns:
        structlog logger bound with service context.

    Example:
        >>> log = get_logger("twitterx.client", level="DEBUG")
        >>> log.info("search", query="python", limit=20)
    """
    settings = get_settings()

    if level is not None:
        min_level = _LEVELS[normalize_level(level)]
    elif settings.is_silent:
        min_level = logging.CRITICAL
    else:
        min_level = _LEVELS[settings.log_level]

    processors = _get_production_processors() if settings.is_production else _get_dev_processors()

    return structlog.wrap_logger(
        structlog.PrintLogger(file=sys.stdout),
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        cache_logger_on_first_use=True,
        service=name,
    )
