"""File logging for the tasktracker package.

Every module logs through ``logging.getLogger(__name__)``. Those records
propagate to the ``tasktracker`` logger, which ``get_logger()`` attaches to
a rotating file under the platform log directory. Level, file size and
backup count come from the ``logging`` section of the default profile, and
``TASKTRACKER_LOG_LEVEL`` overrides the level.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

from tasktracker.config import get_config_manager

_APP_NAME = "tasktracker"
_LOG_FILE = "tasktracker.log"
_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_logger: logging.Logger | None = None


def _file_handler(max_bytes: int, backup_count: int) -> logging.Handler:
    log_dir = Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    return handler


def get_logger() -> logging.Logger:
    """Return the package logger, configuring it on first use."""
    global _logger
    if _logger is not None:
        return _logger

    config_manager = get_config_manager()
    settings = config_manager.config.logging
    level = config_manager.log_level()

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(logging.getLevelNamesMapping().get(level, logging.DEBUG))
    if not logger.handlers:
        logger.addHandler(_file_handler(settings.max_bytes, settings.backup_count))
    # Keep store records out of the console output of CLI commands
    logger.propagate = False

    _logger = logger
    return _logger
