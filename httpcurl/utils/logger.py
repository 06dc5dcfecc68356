"""Structured logging for http-curl.

Request-scoped fields (request id, method, path) are bound with
``structlog.contextvars`` by RequestLoggingMiddleware, so every log line
emitted while a request is in flight carries them, including the curl
argument line logged by the service layer.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor

REQUEST_ID_KEY = "request_id"


def _resolve_level(log_level: str) -> int:
    """Map a level name to its numeric value; unknown names fall back to INFO."""
    level = logging.getLevelName(log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True
) -> None:
    """Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON lines. If False, use console format.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "httpcurl") -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str, **fields: Any) -> None:
    """Attach ``request_id`` and any extra fields to every subsequent log line."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**{REQUEST_ID_KEY: request_id}, **fields)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def current_request_id() -> Optional[str]:
    return structlog.contextvars.get_contextvars().get(REQUEST_ID_KEY)


# Initialize logging with sensible defaults.
# Reconfigured by main.py from the environment.
configure_logging()
