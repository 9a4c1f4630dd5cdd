"""Structured logging configuration.

This module initializes structlog with a stable JSON line format.
Diagnostics go to stderr so the CLI summary on stdout stays clean.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Install the process-wide structlog configuration.

    Args:
        level: Minimum level name, e.g. ``"info"`` or ``"debug"``.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        logger_factory=_stderr_logger_factory,
    )


def ensure_logging_configured() -> None:
    """Install the default configuration unless one is already in place."""
    if not structlog.is_configured():
        configure_logging()


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    ensure_logging_configured()
    return structlog.get_logger(name)


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    """Create a print logger bound to the current stderr stream."""
    return structlog.PrintLogger(sys.stderr)


def _level_number(level: str) -> int:
    """Map a level name onto its stdlib numeric value."""
    return logging.getLevelName(level.upper())
