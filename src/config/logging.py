"""Structured logging configuration for the bookkeeper."""

import logging
import sys
from typing import Optional

import structlog

from src.config.settings import AppSettings


def configure_logging(
    level: Optional[str] = None,
    format: Optional[str] = None,
) -> None:
    """
    Configure structlog once at process start.

    Args:
        level: DEBUG, INFO, WARNING or ERROR. Defaults to APP_LOG_LEVEL.
        format: "json" or "console". Defaults to APP_LOG_FORMAT.
    """
    if level is None or format is None:
        app_settings = AppSettings()
        level = level or app_settings.log_level
        format = format or app_settings.log_format

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level),
    )

    if format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound to the given name (typically __name__)."""
    return structlog.get_logger(name)
