"""Logger hierarchy and handler setup for pkgcatalog."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT_LOGGER = "pkgcatalog"

CONSOLE_FORMAT = "[pkgcatalog] %(levelname)s %(message)s"
# catalogers may run on pool threads, so the file sink records the thread
FILE_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``pkgcatalog.<name>``, or the root pkgcatalog logger."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Send pkgcatalog logs to stderr and, when given, to ``log_file``.

    Handlers from an earlier call are closed first. The report itself goes to
    stdout, so console logging never mixes into it.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    _close_handlers(logger)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    logger.addHandler(_with_format(logging.StreamHandler(sys.stderr), CONSOLE_FORMAT))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_with_format(logging.FileHandler(log_file, encoding="utf-8"), FILE_FORMAT))
    return logger


def _with_format(handler: logging.Handler, fmt: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


__all__ = ["configure_logging", "get_logger"]
