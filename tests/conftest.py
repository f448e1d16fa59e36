"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real config, data and log
directories.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from tasktracker.core.manager import TaskManager
from tasktracker.models import Epic


@pytest.fixture()
def manager() -> TaskManager:
    return TaskManager()


@pytest.fixture()
def epic(manager) -> Epic:
    return manager.add_epic(Epic(name="Release", description="Ship it"))


@pytest.fixture()
def isolated_dirs(tmp_path, monkeypatch):
    """Point config, data and log directories at *tmp_path*.

    The task file is forced to ``tmp_path / "tasks.csv"`` through the
    environment override, and the config and logger singletons are reset.
    """
    import tasktracker.config as config_mod
    import tasktracker.utils.logger as logger_mod

    data_file = tmp_path / "tasks.csv"
    monkeypatch.setenv("TASKTRACKER_DATA_FILE", str(data_file))
    config_mod._config_manager = None
    logger_mod._logger = None
    logging.getLogger("tasktracker").handlers.clear()

    with (
        patch("tasktracker.config.user_config_dir", return_value=str(tmp_path / "config")),
        patch("tasktracker.config.user_data_dir", return_value=str(tmp_path / "data")),
        patch("tasktracker.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")),
    ):
        yield data_file

    config_mod._config_manager = None
    logger_mod._logger = None
    logging.getLogger("tasktracker").handlers.clear()
