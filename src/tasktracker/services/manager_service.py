"""Factory for the task store used by the CLI and the HTTP server."""

from __future__ import annotations

import logging
from pathlib import Path

from tasktracker.config import get_config_manager
from tasktracker.storage import FileBackedTaskManager

logger = logging.getLogger(__name__)


def get_task_manager(
    profile: str = "default", data_file: str | Path | None = None
) -> FileBackedTaskManager:
    """Load the file-backed task store for a profile.

    Args:
        profile: Configuration profile used to resolve the task file
        data_file: Explicit task file, overriding configuration

    Returns:
        FileBackedTaskManager restored from the task file
    """
    path = Path(data_file) if data_file else get_config_manager(profile).data_file_path()
    logger.debug("Opening task store at %s", path)
    return FileBackedTaskManager.load_from_file(path)
