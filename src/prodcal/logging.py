"""
Structured logging configuration for prodcal.

The library only emits events through structlog loggers; applications (and the
``prodcal`` command) decide how they are rendered by calling ``configure_logging``.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Route prodcal events to stderr through the standard logging module.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ...)
        json_output: One JSON object per event instead of the console layout
    """
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=getattr(logging, level.upper()))

    # Events carry Russian month names and page fragments, keep them readable
    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Module-level structlog logger, e.g. ``logger = get_logger(__name__)``."""
    return structlog.get_logger(name)
