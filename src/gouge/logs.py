"""Transient log file handling for gouge."""

import logging
import sys
from pathlib import Path

from gouge.config import LOG_FILE, LOG_FORMAT

logger = logging.getLogger(__name__)

ROOT_LOGGER = "gouge"


def setup_logging(path: str | Path = LOG_FILE, level: int = logging.INFO) -> logging.Handler:
    """
    Send gouge's log records to a file.

    Falls back to stdout when the file cannot be opened.

    Returns:
        The handler that was attached, for cleanup().
    """
    handler: logging.Handler
    error: OSError | None = None
    try:
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError as exc:
        handler = logging.StreamHandler(sys.stdout)
        error = exc
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.addHandler(handler)
    if error is not None:
        logger.warning("Could not create log file %s: %s", path, error)
    return handler


def cleanup(handler: logging.Handler | None, path: str | Path = LOG_FILE) -> None:
    """Detach the log handler and delete the log file if it exists."""
    logger.info("Application is closing and cleaning up")
    if handler is not None:
        logging.getLogger(ROOT_LOGGER).removeHandler(handler)
        handler.close()
    Path(path).unlink(missing_ok=True)
