"""Unit tests for command decorators."""

from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from tasktracker.commands.decorators import command_wrapper
from tasktracker.exceptions import NotFoundError, StorageIOError, ValidationError
from tasktracker.utils.exit_codes import ERROR_CONFLICT, ERROR_NOT_FOUND, ERROR_STORAGE

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(isolated_dirs):
    return isolated_dirs


def _app_raising(error: Exception) -> typer.Typer:
    app = typer.Typer()

    @app.command()
    @command_wrapper
    def boom() -> None:
        raise error

    return app


@pytest.mark.parametrize(
    "error, code",
    [
        (NotFoundError("task id:1 not found"), ERROR_NOT_FOUND),
        (ValidationError("overlaps"), ERROR_CONFLICT),
        (StorageIOError("disk full"), ERROR_STORAGE),
        (RuntimeError("kaboom"), 1),
    ],
)
def test_errors_map_to_exit_codes(error, code):
    result = runner.invoke(_app_raising(error), [])
    assert result.exit_code == code
    assert "Error:" in result.output


def test_typer_exit_passes_through():
    result = runner.invoke(_app_raising(typer.Exit(3)), [])
    assert result.exit_code == 3


def test_bad_parameter_keeps_usage_exit_code():
    result = runner.invoke(_app_raising(typer.BadParameter("nope")), [])
    assert result.exit_code == 2


def test_success_returns_value_and_logs():
    @command_wrapper
    def ok():
        return 42

    with patch("tasktracker.commands.decorators.get_logger") as get_logger:
        assert ok() == 42

    messages = [call.args[0] for call in get_logger.return_value.info.call_args_list]
    assert messages == ["command started: %s", "command completed: %s (%.3fs)"]


def test_wrapper_preserves_name():
    @command_wrapper
    def named():
        pass

    assert named.__name__ == "named"
