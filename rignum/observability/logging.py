"""
structlog configuration for the feed service.

Every log line carries the bound ``request_id`` (set by the request
middleware) and, while a span is active, its ``trace_id``/``span_id``.
Production renders one JSON object per line; elsewhere a coloured console
renderer is used.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from rignum.config.settings import Settings, get_settings
from rignum.observability.tracing import add_trace_context

# Libraries whose INFO output would drown the request log
_QUIET_LOGGERS = ("asyncio", "asyncpg", "uvicorn.access")


def _processors(settings: Settings) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_trace_context,
    ]
    if settings.is_production:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def setup_logging() -> None:
    """
    Configure structlog and route stdlib logging to stdout.

    Called once by the CLI before serving or running a command:
        setup_logging()
        structlog.get_logger(__name__).info("feed_served", count=12)
    """
    settings = get_settings()

    structlog.configure(
        processors=_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """Attach fields (e.g. request_id) to every later log line in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
