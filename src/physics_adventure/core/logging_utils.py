"""Logging helpers scoped to the physics sandbox package."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAMESPACE = "physics_adventure"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: int = logging.INFO, log_file: Optional[str | Path] = None) -> logging.Logger:
    """Configure the package logger with a stdout handler and optional file.

    Existing handlers are dropped first so repeated calls do not duplicate
    output. The library itself never calls this on import.
    """

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialised at level %s", logging.getLevelName(level))
    return logger


__all__ = ["LOGGER_NAMESPACE", "setup_logging"]
