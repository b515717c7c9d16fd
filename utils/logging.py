"""Logging utilities for the Endpoint Metadata Service.

Structured logging with structlog on top of the standard library, rendered
either as JSON lines or as ``timestamp [level]: message {context}``. Every
record carries the request's correlation id when one is set.
"""

import json
import logging
import os
import socket
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog

# Correlation ID of the request being handled
correlation_id_context: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Third-party loggers kept at WARNING and above
NOISY_LOGGERS = ("urllib3", "requests", "asyncio", "uvicorn", "uvicorn.access", "uvicorn.error")


def _render_log4j(logger: Any, name: str, event_dict: Dict[str, Any]) -> str:
    """Render ``timestamp [level]: event {json_context}``."""
    timestamp = event_dict.pop("timestamp", "")
    level = event_dict.pop("level", "info")
    event = event_dict.pop("event", "")
    event_dict.pop("logger", None)

    line = f"{timestamp} [{level}]: {event}"
    if event_dict:
        line += " " + json.dumps(event_dict, sort_keys=True, separators=(",", ":"), default=str)
    return line


def _add_process_context(logger: Any, name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add process ID, hostname and the current correlation ID."""
    event_dict["pid"] = os.getpid()
    event_dict["hostname"] = socket.gethostname()
    correlation_id = correlation_id_context.get()
    if correlation_id and "correlation_id" not in event_dict:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Set the correlation ID for the current context.

    Args:
        correlation_id: The correlation ID to set. If None, generates a new UUID.

    Returns:
        The correlation ID that was set.
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_context.set(correlation_id)
    return correlation_id


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID."""
    return correlation_id_context.get()


def clear_correlation_id() -> None:
    correlation_id_context.set(None)


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        log_level: Minimum level to emit (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: JSON lines when True, log4j-style lines otherwise.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
        force=True,
    )
    for noisy_logger in NOISY_LOGGERS:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_process_context,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(sort_keys=True) if json_output else _render_log4j,
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """Get a configured logger with optional initial context.

    Args:
        name: The logger name (typically __name__ or module path)
        **initial_context: Initial context to bind to the logger

    Returns:
        A bound logger instance with the given name and context
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def create_contextual_logger(name: str, **context: Any) -> structlog.stdlib.BoundLogger:
    """Create a logger bound to service context.

    The correlation ID is not bound here. It is read per record, so one logger
    can serve many requests.

    Args:
        name: The logger name (typically __name__ or module path)
        **context: Context fields to bind, e.g. ``service="search_client"``

    Returns:
        A bound logger with the given context
    """
    return get_logger(name, **context)


def log_exception(
    logger: structlog.stdlib.BoundLogger,
    exception: Exception,
    message: str = "An error occurred",
    **additional_context: Any
) -> None:
    """Log an exception with full context and stack trace.

    Args:
        logger: The logger to use
        exception: The exception that occurred
        message: A descriptive message about the error
        **additional_context: Additional context to include in the log
    """
    logger.error(
        message,
        exc_info=True,
        exception_type=type(exception).__name__,
        exception_message=str(exception),
        **additional_context,
    )
