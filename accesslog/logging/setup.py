"""Structured JSON logging configuration."""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import Processor

from accesslog.core.constants import ACCESS_LOGGER_NAME


def drop_access_below(level_name: str) -> Processor:
    """Drop access records logged under ``level_name``; other events pass."""
    threshold = getattr(logging, level_name.upper(), logging.INFO)

    def processor(_: Any, method_name: str, event_dict: dict) -> dict:
        if event_dict.get("logger") != ACCESS_LOGGER_NAME:
            return event_dict
        if getattr(logging, method_name.upper(), logging.ERROR) < threshold:
            raise structlog.DropEvent
        return event_dict

    return processor


def configure_logging(log_level: str, access_log_level: str = "INFO") -> None:
    """Configure structlog + stdlib logging output in JSON format.

    ``access_log_level`` applies on top of ``log_level`` to request records
    only, e.g. ``WARNING`` keeps just failed requests in the access log.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            drop_access_below(access_log_level),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stdout)
    # the access middleware replaces uvicorn's own access line
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
