#!/usr/bin/env python3
"""
Logging setup for wp-themecheck.

All modules obtain their logger through get_logger(). setup_logging() is
called once by each CLI entry point; calling it again only adjusts the level.
"""

import logging
import os
import sys
from typing import Optional

_CONFIGURED = False

_PLAIN_FORMAT = "%(message)s"
_DEBUG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class _LevelPrefixFormatter(logging.Formatter):
    """Plain messages for INFO, a level prefix for everything else."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno == logging.INFO:
            return message
        return f"{record.levelname.capitalize()}: {message}"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger with a single console handler.

    Args:
        level: Log level name. Defaults to LOG_LEVEL from the environment,
               or INFO when unset.
    """
    global _CONFIGURED

    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(numeric_level)

    if _CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stderr)
    if numeric_level <= logging.DEBUG:
        handler.setFormatter(logging.Formatter(_DEBUG_FORMAT))
    else:
        handler.setFormatter(_LevelPrefixFormatter(_PLAIN_FORMAT))
    root.addHandler(handler)
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)
