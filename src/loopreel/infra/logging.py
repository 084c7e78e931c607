"""
Logging configuration for loopreel.

This module configures structlog for JSON logging across the application.
"""

from __future__ import annotations

import logging
import sys

import structlog

from .settings import settings


def configure_logging(level: str | None = None) -> None:
    """Route structlog events as JSON lines to stderr.

    Safe to call more than once per process; the latest ``level`` wins, so
    each CLI invocation honours its own ``--log-level``.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=(level or settings.log_level).upper(),
        force=True,
    )

    # stdout is reserved for command output.
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger with service context.

    The returned proxy is assembled on first use, so module-level loggers pick
    up the configuration installed later by :func:`configure_logging`.
    """
    return structlog.get_logger(name, service="loopreel", env=settings.env)
