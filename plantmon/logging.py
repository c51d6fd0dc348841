"""Logging setup shared by the plantmon commands."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s - %(message)s"

_NAMESPACE = "plantmon"

# Libraries that log every statement or callback below WARNING
_NOISY_LOGGERS = ("aiosqlite", "asyncio")

_handler: logging.Handler | None = None


def configure(level: int | str = logging.INFO) -> None:
    """Send ``plantmon.*`` records to stderr.

    stdout is kept for the JSON run summaries. Calling this again only
    changes the level.
    """
    global _handler
    app_logger = logging.getLogger(_NAMESPACE)
    app_logger.setLevel(level)
    if _handler is not None:
        return

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    app_logger.addHandler(_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, e.g. ``get_logger("lib.alerts")``."""
    return logging.getLogger(f"{_NAMESPACE}.{name}")
