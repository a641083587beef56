"""Logging setup for ledgerbook.

Library modules only obtain loggers through :func:`get_logger`; handlers
are attached by :func:`configure_logging`, which the CLI calls once.
"""

import logging
import logging.handlers
import os
import sys
import threading
from typing import Any, Optional

__all__ = [
    "get_logger",
    "configure_logging",
    "reset_logging",
    "DEFAULT_MAX_BYTES",
]

_LOGGER_PREFIX = "ledgerbook"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

DEFAULT_MAX_BYTES = 1024 * 1024
DEFAULT_BACKUP_COUNT = 5

_configured = False
_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ledgerbook namespace."""
    if name == _LOGGER_PREFIX or name.startswith(f"{_LOGGER_PREFIX}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def _level_from_env(default: int) -> int:
    value = os.environ.get("LEDGERBOOK_LOG_LEVEL")
    if not value:
        return default
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else default


def _max_bytes_from_env() -> int:
    value = os.environ.get("LEDGERBOOK_LOG_MAX_BYTES")
    try:
        return int(value) if value else DEFAULT_MAX_BYTES
    except ValueError:
        return DEFAULT_MAX_BYTES


def configure_logging(
    *,
    level: Optional[int] = None,
    log_file: Optional[str] = None,
    max_bytes: Optional[int] = None,
    stream: Any = None,
) -> None:
    """Configure the ledgerbook logger hierarchy (idempotent).

    Args:
        level: Log level for the log file. Defaults to LEDGERBOOK_LOG_LEVEL or INFO.
        log_file: Optional path of a size-rotated log file. Its directory is
            created if missing.
        max_bytes: Rotation threshold. Defaults to LEDGERBOOK_LOG_MAX_BYTES or 1 MiB.
        stream: Stream for warnings and errors (defaults to stderr)
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    file_level = level if level is not None else _level_from_env(logging.INFO)

    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.propagate = False
    formatter = logging.Formatter(_FORMAT)

    stream_handler = logging.StreamHandler(stream or sys.stderr)
    stream_handler.setLevel(logging.WARNING)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)
    root_level = logging.WARNING

    if log_file:
        directory = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(directory, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes if max_bytes is not None else _max_bytes_from_env(),
            backupCount=DEFAULT_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        root_level = min(root_level, file_level)

    root_logger.setLevel(root_level)


def reset_logging() -> None:
    """Reset logging configuration. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
