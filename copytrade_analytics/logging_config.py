"""
Structured logging setup.

All modules log through ``structlog.get_logger(__name__)`` using event-name
messages with key/value context. ``configure_logging`` is called once at
application startup.
"""

import logging
import sys

import structlog

from copytrade_analytics.config import settings


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Minimum log level name (defaults to settings.log_level)
        json_logs: Render JSON lines instead of console output
            (defaults to settings.log_json, forced on in production)
    """
    level_name = level or settings.log_level
    if json_logs is None:
        json_logs = settings.log_json or settings.environment == "production"

    log_level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
