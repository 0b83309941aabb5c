"""
Centralized logging configuration.

Modules obtain loggers with ``get_logger(__name__)``. Handlers are only
installed when an application entry point calls ``configure_logging``.
"""

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_handler: logging.Handler | None = None


def configure_logging(level: str | int = logging.WARNING) -> None:
    """Configure the ``fintrack`` logger hierarchy once.

    Args:
        level: Level name (e.g. "INFO") or numeric level.
    """
    global _handler
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger("fintrack")
    root.setLevel(level)
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        root.addHandler(_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A logging.Logger in the ``fintrack`` hierarchy.
    """
    return logging.getLogger(name)
