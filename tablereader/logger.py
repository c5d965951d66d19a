"""
Unified Logging Module
======================

Single place that configures logging for the ``tablereader`` package.

Usage:
    from tablereader.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Located table on sheet %s", sheet_name)
    logger.debug("Row %d rejected", row)
"""

import logging
import sys
from typing import Optional, Union

# Default log format with timestamp, level, and module name
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = logging.INFO

ROOT_LOGGER_NAME = "tablereader"

# Global flag to track if the package root logger has been configured
_root_configured = False


def _configure_root_logger() -> None:
    """
    Attach a stderr handler to the package root logger (stdout carries CLI output).

    Runs once; the ``_root_configured`` flag prevents duplicate handlers.
    """
    global _root_configured
    if _root_configured:
        return

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(DEFAULT_LEVEL)
    root_logger.addHandler(console_handler)
    root_logger.propagate = False

    _root_configured = True


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Return the logger called *name*, configuring the package root first.

    Args:
        name: logger name, normally the caller's ``__name__``
        level: optional level for this logger only

    Example:
        logger = get_logger(__name__)
        logger.info("Opening workbook: %s", path)
    """
    _configure_root_logger()

    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def set_level(level: Union[int, str], logger_name: Optional[str] = None) -> None:
    """
    Set the level of *logger_name*, or of the package root logger.

    Example:
        set_level(logging.DEBUG)                              # whole package
        set_level("DEBUG", "tablereader.table.locator")       # locator only
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
    logger = logging.getLogger(logger_name or ROOT_LOGGER_NAME)
    logger.setLevel(level)


def set_format(fmt: str, datefmt: Optional[str] = DEFAULT_DATE_FORMAT) -> None:
    """Replace the formatter of the package root logger's handlers."""
    _configure_root_logger()
    for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
        handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
