"""Logging setup for the LiftDesk project.

Records go to a size-rotated file and to the console. The level comes from
``LOG_LEVEL`` and the file path from ``LOG_FILE``.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def configure_logging() -> None:
    """Attach file and console handlers to the root logger once."""

    global _configured
    if _configured:
        return

    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    log_file = os.getenv("LOG_FILE", "liftdesk.log")
    if log_file:
        file_handler = RotatingFileHandler(
            log_file, maxBytes=1_000_000, backupCount=3
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger instance."""
    return logging.getLogger(name)


def flush_logs() -> None:
    """Flush all root log handlers."""
    for handler in logging.getLogger().handlers:
        handler.flush()


__all__ = ["configure_logging", "get_logger", "flush_logs"]
