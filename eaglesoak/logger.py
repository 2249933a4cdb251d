"""
Logger factory shared by every EaglesOak module.

Usage:
    from eaglesoak.logger import get_logger
    logger = get_logger(__name__)
    logger.info("Something happened")

The level comes from ``LOG_LEVEL`` (defaults to INFO).
"""

import logging
import sys
from typing import Optional

from .config import get_settings


def _default_level() -> int:
    name = get_settings().log_level.upper()
    return getattr(logging, name, logging.INFO)


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Create and return a named logger with a standardised formatter.

    Args:
        name:  Typically ``__name__`` of the calling module.
        level: Explicit logging level override. If *None*, ``LOG_LEVEL`` is used.
    """
    logger = logging.getLogger(name)

    # Loggers are process-wide; only attach the handler once
    if not logger.handlers:
        resolved_level = level if level is not None else _default_level()
        logger.setLevel(resolved_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(resolved_level)
        console_handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(console_handler)
        logger.propagate = False

    return logger
