"""
Project-wide logging setup.

Usage in the pipeline scripts:

    from shooting_analysis.logging_utils import get_logger
    logger = get_logger(__name__)
    logger.info("Kept %d of %d rows", kept, total)

Library modules just use logging.getLogger(__name__); their records reach
the handler attached here once a script has configured the package logger
via configure_package_logging().
"""

import logging
import os
import sys

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%H:%M:%S"
_PACKAGE = "shooting_analysis"


def _default_level() -> int:
    level = logging.getLevelName(os.getenv("SHOOTING_ANALYSIS_LOG_LEVEL", "INFO").upper())
    # getLevelName returns a "Level X" string for unknown names
    return level if isinstance(level, int) else logging.INFO


def _attach_handler(logger: logging.Logger, level: int) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    logger.addHandler(handler)
    logger.setLevel(level)


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Return a named logger with a consistent format.

    Safe to call multiple times with the same name. Handlers are only
    attached once, so repeated calls never duplicate log lines.
    The level defaults to SHOOTING_ANALYSIS_LOG_LEVEL (INFO if unset).
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        _attach_handler(logger, _default_level() if level is None else level)
    return logger


def configure_package_logging(level: int | None = None) -> logging.Logger:
    """Attach the stdout handler to the shooting_analysis package logger."""
    return get_logger(_PACKAGE, level)
