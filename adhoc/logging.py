"""Logging utilities for adhoc commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "adhoc"
_CONSOLE_FORMAT = "[adhoc] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Library use stays silent until configure_logging installs real handlers.
logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger below ``adhoc``, e.g. ``adhoc.expander``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send adhoc logs to stderr, and to ``log_file`` when given.

    Calling it again replaces the handlers from the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    handlers = [_handler(logging.StreamHandler(), level, _CONSOLE_FORMAT)]
    if log_file is not None:
        handlers.append(_handler(logging.FileHandler(log_file, encoding="utf-8"), level, _FILE_FORMAT))
    logger.handlers[:] = handlers
    return logger


__all__ = ["configure_logging", "get_logger"]
