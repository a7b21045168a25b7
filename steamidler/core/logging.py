"""Logging utilities for steamidler modules."""

import logging

PACKAGE_LOGGER = 'steamidler'

DEFAULT_FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'


def get_logger(name: str) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.

    The logger propagates to the root logger so it works with basicConfig()
    without an explicit setup_logging() call. A default WARNING level is only
    applied while the root logger has no handlers.

    Args:
        name: Logger name (typically 'steamidler.<component>')

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logger.setLevel(logging.WARNING)

    return logger


def parse_level(value) -> int:
    """Convert 'debug', 'INFO', '20' or an int into a logging level."""
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value}")
    return level
