"""Logging for runf.

Console output is kept quiet by default so the toolchain's own output stays
readable. A log file, when requested, always records the debug trail: scratch
workspace path, enumerated files, extracted references and the toolchain path.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "runf"
_CONSOLE_FORMAT = "[runf] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a component logger such as ``runf.workspace``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install the console handler and, if given, a debug-level file handler."""
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    logger.addHandler(_handler(logging.StreamHandler(), console_level, _CONSOLE_FORMAT))
    if log_file is None:
        logger.setLevel(console_level)
        return logger

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.addHandler(
        _handler(logging.FileHandler(log_file, encoding="utf-8"), logging.DEBUG, _FILE_FORMAT)
    )
    logger.setLevel(logging.DEBUG)
    return logger


__all__ = ["configure_logging", "get_logger"]
