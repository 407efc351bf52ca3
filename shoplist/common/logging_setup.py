"""
Structured logging setup (structlog)

Call configure_logging() once from an entry point (scripts, app startup).
Library modules only do `logger = structlog.get_logger()`.
"""
import logging
from typing import Optional

import structlog

from shoplist.common.config import get_settings


def configure_logging(level: Optional[str] = None, json: Optional[bool] = None) -> None:
    """
    Configure structlog processors and level filtering.

    Args:
        level: Log level name (defaults to settings.log_level)
        json: Render JSON lines (defaults to True in production)
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    if json is None:
        json = settings.environment == "production"

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
