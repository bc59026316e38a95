"""Logging setup for erpforms.

Modules log through ``logging.getLogger(__name__)``. ``setup_logger`` attaches
handlers once to the package logger, so every ``erpforms.*`` logger inherits
them. Timestamps are ISO 8601.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from erpforms.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def setup_logger(
    name: str = "erpforms",
    settings: Optional[Settings] = None,
    *,
    console: bool = True,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Configure a logger from the application settings.

    Handlers are attached on the first call only; later calls just update the
    level. ``log_to_file`` adds a rotating ``<log_dir>/<name>.log``.

    Args:
        name: Logger name (the package name configures every module logger)
        settings: Settings to read, defaults to ``get_settings()``
        console: Also log to stderr
        max_bytes: Maximum log file size before rotation
        backup_count: Number of rotated files to keep

    Raises:
        ValueError: If ``log_level`` is not a logging level name
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        raise ValueError(
            f"Invalid log level: {settings.log_level}. "
            f"Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )

    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    handlers = []
    if settings.log_to_file:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_dir / f"{name}.log", maxBytes=max_bytes, backupCount=backup_count
        ))
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
