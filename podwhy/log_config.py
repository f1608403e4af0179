"""Centralized structured logging configuration using structlog.

This module configures structlog with timestamps, call-site information,
query IDs and contextual logging support. Logs are written to stderr so
that stdout carries only the query report.

Example:
    >>> from podwhy.log_config import configure_logging, get_logger
    >>> configure_logging(level="INFO")
    >>> logger = get_logger(__name__)
    >>> logger.info("query_started", source="A", target="G")
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(level: str = "WARNING", json_logs: bool = False) -> None:
    """Configure structlog for pod-why.

    Sets up structlog with processors for timestamps, log levels, stack info,
    and JSON or console rendering. Also configures the standard library
    logging to work with structlog.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, use JSONRenderer; if False, use ConsoleRenderer

    Raises:
        ValueError: If an invalid log level is provided
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        msg = f"Invalid log level: {level}"
        raise ValueError(msg)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )
    # basicConfig is a no-op once handlers exist; the level must still apply
    logging.getLogger().setLevel(numeric_level)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger.

    Args:
        name: Logger name (typically __name__ of the calling module)
    """
    return structlog.get_logger(name)


def bind_query_id(query_id: str) -> None:
    """Bind a query ID to the logging context.

    Every log line emitted while answering the query carries it, which ties
    together cache loading, graph building and traversal events.

    Args:
        query_id: Unique identifier of the query
    """
    structlog.contextvars.bind_contextvars(query_id=query_id)


def unbind_query_id() -> None:
    """Remove the query ID from the logging context."""
    structlog.contextvars.unbind_contextvars("query_id")


def bind_context(**kwargs: Any) -> None:
    """Bind arbitrary context variables to the logging context.

    Args:
        **kwargs: Key-value pairs to add to the logging context

    Example:
        >>> bind_context(source="A", target="G")
        >>> logger.info("query_started")  # Will include source and target
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific context variables from the logging context."""
    structlog.contextvars.unbind_contextvars(*keys)
