"""
Logging configuration for the blogguard service.

Application modules log under the ``blogguard`` logger tree:
    import logging
    logger = logging.getLogger(__name__)

The server also routes uvicorn's own loggers through the same handlers,
so request lines and rate limit decisions end up in one rotating file.
Client identifiers are masked by the callers (see blogguard.logmask).
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Iterable

from blogguard.config.settings import Settings

LOGGER_NAME = "blogguard"
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Thread name is included because limiter decisions interleave across workers.
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _build_handlers(
    log_dir: Path | None,
    level: int,
    log_file: str,
    max_bytes: int,
    backup_count: int,
) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    handlers: list[logging.Handler] = [console_handler]

    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            handlers.append(
                logging.handlers.RotatingFileHandler(
                    filename=log_dir / log_file,
                    maxBytes=max_bytes,
                    backupCount=backup_count,
                    encoding="utf-8",
                )
            )
        except OSError as e:
            logging.getLogger(LOGGER_NAME).warning("Could not set up file logging: %s", e)

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    log_dir: Path | None = None,
    level: int = logging.INFO,
    log_file: str = "blogguard.log",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    extra_loggers: Iterable[str] = (),
) -> None:
    """
    Configure console and rotating file logging for the service.

    Calling this again only adjusts the level; handlers are installed once.

    Args:
        log_dir: Directory for log files. If None, only console logging is set up.
        level: Minimum log level.
        log_file: Name of the log file.
        max_bytes: Size at which the log file is rotated.
        backup_count: Number of rotated files to keep.
        extra_loggers: Other logger names (e.g. uvicorn's) that should write
            through the same handlers instead of their own.
    """
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(level)

    if app_logger.handlers:
        for handler in app_logger.handlers:
            handler.setLevel(level)
        return

    handlers = _build_handlers(log_dir, level, log_file, max_bytes, backup_count)
    for handler in handlers:
        app_logger.addHandler(handler)

    for name in extra_loggers:
        other = logging.getLogger(name)
        other.handlers[:] = handlers
        other.setLevel(level)
        other.propagate = False


def setup_logging_from_settings(settings: Settings) -> None:
    """Configure logging from the logging section of Settings, server loggers included."""
    setup_logging(
        log_dir=settings.logs_dir,
        level=settings.logging.level_number,
        log_file=settings.logging.log_file,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
        extra_loggers=SERVER_LOGGERS,
    )
