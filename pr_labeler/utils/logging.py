"""
Logging configuration and utilities
"""

import logging
import sys
import threading
from typing import Optional

from ..config import get_settings

_setup_lock = threading.Lock()


def setup_logging(
    name: Optional[str] = None,
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    force: bool = False
) -> logging.Logger:
    """
    Setup logging configuration

    A logger that already has handlers is returned as is unless ``force``
    is set, so repeated calls never stack or swap handlers.

    Args:
        name: Logger name
        level: Log level
        format_string: Log format string
        force: Replace the existing handlers

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name or __name__)

    with _setup_lock:
        if logger.handlers and not force:
            return logger

        settings = get_settings()
        log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
        log_format = format_string or settings.log_format

        logger.setLevel(log_level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(console_handler)

        # Prevent propagation to root logger
        logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name

    Args:
        name: Logger name

    Returns:
        Logger instance, configured on first use
    """
    return setup_logging(name)


class LoggerMixin:
    """Mixin class to add logging capability to other classes"""

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class"""
        return get_logger(f"{self.__class__.__module__}.{self.__class__.__name__}")
