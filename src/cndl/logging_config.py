"""Structured logging configuration.

Library modules log key/value events through ``get_logger``; the CLI calls
``configure_logging`` once to choose the level.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog to render JSON events on stderr.

    Args:
        verbose: Emit debug events when True, warnings and above otherwise
    """
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__

    Returns:
        A lazily configured structlog logger.
    """
    return structlog.get_logger(name)
