"""
structlog setup for the dashlint CLI.

The lint report owns stdout; diagnostics are written to stderr so the two
never interleave when output is piped.
"""

import logging
import sys
from typing import Any

import structlog

LOG_FORMATS = ("json", "console")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: int | str = logging.WARNING, log_format: str = "json") -> None:
    """Configure the structlog/standard logging bridge.

    Args:
        level: Level name or number
        log_format: ``json`` for machine-readable lines, ``console`` for humans
    """
    if isinstance(level, str):
        if level.upper() not in LOG_LEVELS:
            raise ValueError(f"unknown log level '{level}', expected one of {', '.join(LOG_LEVELS)}")
        level = logging.getLevelName(level.upper())
    if log_format not in LOG_FORMATS:
        raise ValueError(f"unknown log format '{log_format}', expected one of {', '.join(LOG_FORMATS)}")

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)


def bind_context(**kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Logger carrying ``kwargs`` on every event, e.g. the directory being linted."""
    return structlog.get_logger().bind(**kwargs)
