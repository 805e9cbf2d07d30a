"""
MIT License

Lightweight logging helpers for readgff.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

_LOGGER: Optional[logging.Logger] = None

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def get_logger(name: str = "readgff") -> logging.Logger:
    """Return a process-wide logger configured for CLI use."""
    global _LOGGER
    if _LOGGER is None:
        logger = logging.getLogger(name)
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
        _LOGGER = logger
    return _LOGGER


def set_level(level: str | int) -> None:
    """Adjust the process-wide logger, accepting names such as ``"debug"``."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    get_logger().setLevel(level)


__all__ = ["get_logger", "set_level", "LOG_FORMAT", "DATE_FORMAT"]
