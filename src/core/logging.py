"""Observability setup for the task service, backed by Pydantic Logfire.

Modules log through ``logging.getLogger(__name__)``; ``configure_logfire``
attaches a ``LogfireLoggingHandler`` to the root logger so those records
reach Logfire. Service operations open a span per call so a
request can be followed from the router into the store.

Example:
    logger = logging.getLogger(__name__)
    with span("task_service.delete_task"):
        log_with_context(logger, "info", "Task deleted", task_id=7)
"""

import logging

import logfire
from fastapi import FastAPI

from src.core.config import settings


SERVICE_NAME = "taskapp"
SERVICE_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def configure_logfire() -> None:
    """Configure Logfire for this process.

    Nothing leaves the process unless ``LOGFIRE_TOKEN`` is set.
    """
    logfire.configure(
        token=settings.logfire_token,
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    attach_logging_handler()
    logger.info("Logfire configured", extra={"environment": settings.environment})


def attach_logging_handler() -> logfire.LogfireLoggingHandler:
    """Forward standard-library log records to Logfire.

    Idempotent: the root logger carries at most one Logfire handler.
    """
    root = logging.getLogger()
    root.setLevel(settings.log_level.upper())

    for handler in root.handlers:
        if isinstance(handler, logfire.LogfireLoggingHandler):
            return handler

    handler = logfire.LogfireLoggingHandler()
    root.addHandler(handler)
    return handler


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request handled by ``app``."""
    logfire.instrument_fastapi(app)
    logger.info("FastAPI instrumentation enabled")


def span(name: str) -> logfire.LogfireSpan:
    """Open a named span, e.g. ``span("task_service.update_task")``."""
    return logfire.span(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Emit ``message`` at ``level`` with ``context`` attached as structured fields.

    Args:
        logger: Logger to write to
        level: Level name ("debug", "info", "warning", "error", "critical")
        message: Log message
        **context: Fields such as task_id, expected, actual
    """
    getattr(logger, level.lower())(message, extra=context)
