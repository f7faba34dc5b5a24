"""
Structured logging for watchbrainz.

Configured once by the CLI entry point; every component receives a bound
logger (or falls back to ``get_logger(__name__)``) instead of reaching for a
process-wide logger object.

Configuration Flow:
    ::

        configure_logging(level="INFO", json_format=False)
            │
            ▼
        structlog processor chain:
          1. merge_contextvars      (artist/run context bound by callers)
          2. add_log_level
          3. TimeStamper            ("%Y-%m-%d %H:%M:%S", local time)
          4. ConsoleRenderer | JSONRenderer
            │
            ▼
        stderr  (stdout is reserved for command output such as ``list``)

Usage:
    >>> from watchbrainz.core.logging import configure_logging, get_logger
    >>> configure_logging(level="INFO")
    >>> log = get_logger(__name__)
    >>> log.info("artist_added", artist="Stereolab", artist_id="...")

Tags:
    logging, structlog, observability, watchbrainz
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Store service name for metadata
_SERVICE_NAME = "watchbrainz"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to JSON logs."""
    event_dict.setdefault("service", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    service: str = "watchbrainz",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for one JSON object per line, False for console
        service: Service name included in JSON logs

    Example:
        # Cron job, warnings only
        configure_logging(level="WARNING")

        # Shipping logs somewhere
        configure_logging(level="INFO", json_format=True)
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    level_num = getattr(logging, level.upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt=TIMESTAMP_FORMAT, utc=False),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]

    if json_format:
        shared_processors.append(_add_service_metadata)
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    # httpx logs every request at INFO through stdlib logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=max(level_num, logging.WARNING),
        force=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog BoundLogger with ``logger_name`` bound to *name*
    """
    if name is None:
        return structlog.get_logger()
    # PrintLogger has no name of its own; bind it so the renderer shows it
    return structlog.get_logger(logger_name=name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs.

    Example:
        bind_context(command="run")
        log.info("sync_started")  # Includes command="run"
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
