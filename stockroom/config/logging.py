"""
Structured logging configuration using structlog.

Colored console output in development, JSON lines elsewhere. Background
jobs bind their name with job_context() so every event of a tick can be
traced back to it.
"""

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from stockroom.config.settings import Settings, get_settings

# Third-party loggers that drown out the application at INFO
QUIET_LOGGERS: dict[str, int] = {
    "aiosqlite": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "websockets": logging.WARNING,
}


def app_context_processor(settings: Settings) -> Processor:
    """Processor that stamps every event with app name, version and environment."""
    context = {
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }

    def add_app_context(_: Any, __: str, event_dict: EventDict) -> EventDict:
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_app_context


def configure_logging(log_level: str | None = None) -> None:
    """Configure structlog and the stdlib root logger."""
    settings = get_settings()
    level = getattr(logging, (log_level or settings.log_level).upper())

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        app_context_processor(settings),
    ]
    if settings.environment == "development":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, quiet_level))


@contextmanager
def job_context(job: str) -> Iterator[str]:
    """Bind job name and a fresh run id to all events logged inside the block."""
    run_id = uuid.uuid4().hex[:8]
    with structlog.contextvars.bound_contextvars(job=job, run_id=run_id):
        yield run_id


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
