"""Logging setup for json-locale-translate."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(filename)s:%(lineno)d %(levelname)s %(message)s"
ROOT_LOGGER = "json_locale_translate"


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str | int = "WARNING", log_file: Path | None = None) -> logging.Logger:
    """
    Attach handlers to the package logger.

    Safe to call more than once; existing handlers are replaced so the level
    and destination always match the latest call.

    Args:
        level: Level name (e.g. 'DEBUG') or numeric level
        log_file: Optional file to log to in addition to stdout

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger
