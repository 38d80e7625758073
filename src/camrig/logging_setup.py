"""Logging helpers for camrig.

Console logging only; the rig runs inside an interactive frame loop and has
nothing worth persisting to disk.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

_ROOT_NAME = "camrig"


def setup_logging(*, level: int = logging.INFO) -> logging.Logger:
    """Configure console logging for the ``camrig`` namespace."""

    logger = logging.getLogger(_ROOT_NAME)
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler(stream=sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a named logger under the ``camrig`` namespace."""

    if not name:
        return logging.getLogger(_ROOT_NAME)
    if name == _ROOT_NAME or name.startswith(_ROOT_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_NAME}.{name}")


__all__ = ["setup_logging", "get_logger"]
