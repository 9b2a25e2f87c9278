"""
Structured logging setup.

Routes structlog events through the standard library logging module so
that library and application logs share one handler and level.
"""

import logging
import sys
from typing import Optional

import structlog

from sell_thirds.config import Settings, settings


def configure_logging(
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    app_settings: Optional[Settings] = None,
) -> None:
    """
    Configure structlog and stdlib logging.

    Args:
        level: Log level name (defaults to settings.log_level)
        json_logs: Render JSON lines instead of console output
            (defaults to settings.log_json)
        app_settings: Settings to read defaults from (defaults to module settings)
    """
    app_settings = app_settings or settings
    level_name = (level or app_settings.log_level).upper()
    render_json = app_settings.log_json if json_logs is None else json_logs

    renderer: structlog.types.Processor
    if render_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
