"""Diagnostic logging setup.

Progress meant for the user goes through ConsoleProtocol. Logging carries
diagnostics (resolved URLs, requests, archive scanning) on stderr and is
quiet unless ``--log-level`` / ``GRAB_LOG_LEVEL`` asks for more.
"""

from __future__ import annotations

import logging
import sys

__all__ = ["configure_logging"]

_FMT_MINIMAL = "%(levelname)s: %(message)s"
_FMT_VERBOSE = "%(levelname)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"


def configure_logging(level: str = "WARNING") -> None:
    """Route all loggers to a single stderr handler at the given level.

    Args:
        level: Logging level name ("DEBUG", "INFO", "WARNING", "ERROR")
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    if numeric_level <= logging.DEBUG:
        formatter = logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_DEBUG)
    elif numeric_level <= logging.INFO:
        formatter = logging.Formatter(_FMT_VERBOSE)
    else:
        formatter = logging.Formatter(_FMT_MINIMAL)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)
