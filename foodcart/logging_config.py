"""Package-wide logger shared by all FoodCart modules."""
from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "foodcart"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger once and set its level."""
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


__all__ = ["LOGGER_NAME", "logger", "setup_logging"]
