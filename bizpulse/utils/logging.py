"""
Structured logging for BizPulse.

Every entry carries the service name and version, the request id bound by the
request-tracing middleware, and an event name plus keyword context
(``logger.info("metric_ingested", user_id=..., kind=...)``).
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from bizpulse import __version__
from bizpulse.config import get_settings

SERVICE_NAME = "bizpulse"


def add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp service name, version and severity on every entry."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", __version__)
    event_dict["severity"] = method_name.upper()
    return event_dict


def configure_logging() -> None:
    """
    Configure structlog on top of stdlib logging.

    JSON lines when ``log_format == "json"`` outside dev mode, otherwise the
    console renderer (uncoloured under tests).
    """
    settings = get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    if settings.log_format == "json" and not settings.dev_mode:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=not settings.testing)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            add_service_context,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    return structlog.get_logger(name)
