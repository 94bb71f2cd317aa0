"""Logging setup for applications embedding `storekit`."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def configure_logging(
    level: str | int = logging.INFO,
    log_file: str | None = None,
    *,
    logger_name: str = "storekit",
) -> logging.Logger:
    """
    Configure the package logger to write to stderr and, optionally, a UTF-8 file.
    Existing handlers on the logger are replaced.
    """

    resolved_level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(resolved_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    logger = logging.getLogger(logger_name)
    logger.setLevel(resolved_level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(resolved_level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        directory = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(directory, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(resolved_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    logger.debug("storekit logging initialized (level=%s)", logging.getLevelName(resolved_level))
    if log_file:
        logger.debug("storekit log file: %s", log_file)
    return logger
