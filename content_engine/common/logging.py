"""Structured logging configuration for Content Engine.

Every module gets its own named logger from :func:`setup_logging`; the
CLI's ``--verbose`` / ``--quiet`` flags move all of them at once through
:func:`set_level`.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_loggers: dict[str, logging.Logger] = {}


def setup_logging(
    level: int = logging.INFO,
    module_name: str = "content_engine",
) -> logging.Logger:
    """Configure and return a logger with consistent formatting.

    Args:
        level: Logging level (default INFO).
        module_name: Name for the logger instance.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)
    _loggers[module_name] = logger

    if logger.handlers:
        return logger

    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger


def set_level(level: int) -> None:
    """Change the level of every logger created by :func:`setup_logging`."""
    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def level_for(verbose: bool = False, quiet: bool = False) -> int:
    """Map the CLI's verbosity flags to a logging level."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO
