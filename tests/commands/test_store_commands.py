"""CLI tests for the tasks, epics and subtasks command groups."""

import json

import pytest
from typer.testing import CliRunner

from tasktracker.main import app
from tasktracker.storage import FileBackedTaskManager
from tasktracker.utils.exit_codes import ERROR_CONFLICT, ERROR_NOT_FOUND, ERROR_STORAGE

runner = CliRunner()


def _invoke(*args, **kwargs):
    return runner.invoke(app, list(args), **kwargs)


def _json(*args):
    result = _invoke(*args, "-o", "json")
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


@pytest.fixture(autouse=True)
def data_file(isolated_dirs):
    return isolated_dirs


class TestTasksCommands:
    def test_add_and_list(self, data_file):
        result = _invoke(
            "tasks", "add", "Write report", "-d", "quarterly",
            "--start", "2024-01-01T10:00", "--duration", "30",
        )
        assert result.exit_code == 0, result.output
        assert "Task created: 1" in result.output

        tasks = _json("tasks", "list")
        assert tasks[0]["name"] == "Write report"
        assert tasks[0]["description"] == "quarterly"
        assert tasks[0]["startTime"] == "2024-01-01T10:00:00"
        assert data_file.exists()

    def test_overlap_exits_with_conflict_code(self):
        _invoke("tasks", "add", "A", "--start", "2024-01-01T10:00", "--duration", "30")
        result = _invoke("tasks", "add", "B", "--start", "2024-01-01T10:15", "--duration", "30")
        assert result.exit_code == ERROR_CONFLICT
        assert "overlaps" in result.output
        assert len(_json("tasks", "list")) == 1

    def test_get_records_history(self):
        _invoke("tasks", "add", "A")
        _invoke("tasks", "add", "B")
        _json("tasks", "get", "2")
        _json("tasks", "get", "1")
        assert [t["id"] for t in _json("history")] == [2, 1]

    def test_get_missing_exits_not_found(self):
        result = _invoke("tasks", "get", "9")
        assert result.exit_code == ERROR_NOT_FOUND
        assert "task id:9 not found" in result.output

    def test_update_keeps_unspecified_fields(self):
        _invoke("tasks", "add", "A", "-d", "keep me", "--start", "2024-01-01T10:00", "--duration", "30")
        result = _invoke("tasks", "update", "1", "--name", "A2", "--status", "in-progress")
        assert result.exit_code == 0, result.output

        task = _json("tasks", "list")[0]
        assert task["name"] == "A2"
        assert task["status"] == "IN_PROGRESS"
        assert task["description"] == "keep me"
        assert task["startTime"] == "2024-01-01T10:00:00"

    def test_update_unschedule(self):
        _invoke("tasks", "add", "A", "--start", "2024-01-01T10:00", "--duration", "30")
        assert _invoke("tasks", "update", "1", "--unschedule").exit_code == 0
        assert _json("prioritized") == []

    def test_update_does_not_record_history(self):
        _invoke("tasks", "add", "A")
        _invoke("tasks", "update", "1", "--name", "B")
        assert _json("history") == []

    def test_update_missing(self):
        assert _invoke("tasks", "update", "3", "--name", "x").exit_code == ERROR_NOT_FOUND

    def test_bad_status_is_usage_error(self):
        result = _invoke("tasks", "add", "A", "--status", "someday")
        assert result.exit_code == 2

    def test_bad_start_is_usage_error(self):
        result = _invoke("tasks", "add", "A", "--start", "tomorrow")
        assert result.exit_code == 2

    def test_delete_with_confirmation(self):
        _invoke("tasks", "add", "A")
        result = _invoke("tasks", "delete", "1", input="n\n")
        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert len(_json("tasks", "list")) == 1

        result = _invoke("tasks", "delete", "1", "--force")
        assert result.exit_code == 0
        assert _json("tasks", "list") == []

    def test_clear(self):
        _invoke("tasks", "add", "A")
        _invoke("tasks", "add", "B")
        assert _invoke("tasks", "clear", "--yes").exit_code == 0
        assert _json("tasks", "list") == []

    def test_table_output(self):
        _invoke("tasks", "add", "A")
        result = _invoke("tasks", "list")
        assert result.exit_code == 0
        assert "NEW" in result.output

    def test_yaml_output(self):
        _invoke("tasks", "add", "A")
        result = _invoke("tasks", "list", "-o", "yaml")
        assert result.exit_code == 0
        assert "name: A" in result.output

    def test_unknown_output_format(self):
        result = _invoke("tasks", "list", "-o", "xml")
        assert result.exit_code == 2


class TestEpicAndSubtaskCommands:
    def _setup(self):
        assert _invoke("epics", "add", "Release", "-d", "v1").exit_code == 0
        result = _invoke(
            "subtasks", "add", "1", "Build", "--status", "done",
            "--start", "2024-01-01T09:00", "--duration", "60",
        )
        assert result.exit_code == 0, result.output
        assert _invoke("subtasks", "add", "1", "Test").exit_code == 0

    def test_epic_is_derived(self):
        self._setup()
        epic = _json("epics", "get", "1")
        assert epic["status"] == "IN_PROGRESS"
        assert epic["subtaskIds"] == [2, 3]
        assert epic["startTime"] == "2024-01-01T09:00:00"

    def test_epic_subtasks(self):
        self._setup()
        assert [s["name"] for s in _json("epics", "subtasks", "1")] == ["Build", "Test"]

    def test_subtask_for_missing_epic(self):
        result = _invoke("subtasks", "add", "5", "orphan")
        assert result.exit_code == ERROR_NOT_FOUND

    def test_update_subtask_status_refreshes_epic(self):
        self._setup()
        assert _invoke("subtasks", "update", "3", "--status", "DONE").exit_code == 0
        assert _json("epics", "list")[0]["status"] == "DONE"

    def test_update_epic_name(self):
        self._setup()
        assert _invoke("epics", "update", "1", "--name", "Release 2").exit_code == 0
        epic = _json("epics", "list")[0]
        assert epic["name"] == "Release 2"
        assert epic["description"] == "v1"

    def test_delete_epic_cascades(self):
        self._setup()
        assert _invoke("epics", "delete", "1", "-f").exit_code == 0
        assert _json("subtasks", "list") == []

    def test_delete_subtask(self):
        self._setup()
        assert _invoke("subtasks", "delete", "2", "-f").exit_code == 0
        assert _json("epics", "get", "1")["subtaskIds"] == [3]

    def test_clear_subtasks_keeps_epics(self):
        self._setup()
        assert _invoke("subtasks", "clear", "-y").exit_code == 0
        epic = _json("epics", "get", "1")
        assert epic["status"] == "NEW"
        assert epic["subtaskIds"] == []

    def test_clear_epics(self):
        self._setup()
        assert _invoke("epics", "clear", "-y").exit_code == 0
        assert _json("epics", "list") == []
        assert _json("subtasks", "list") == []

    def test_prioritized_includes_subtasks_not_epics(self):
        self._setup()
        _invoke("tasks", "add", "Deploy", "--start", "2024-01-01T11:00", "--duration", "15")
        kinds = [t["kind"] for t in _json("prioritized")]
        assert kinds == ["SUBTASK", "TASK"]


def test_corrupt_file_exits_with_storage_code(data_file):
    data_file.write_text("id,type,name,status,description,epic\nnot,a,valid,row,\n", encoding="utf-8")
    result = _invoke("tasks", "list")
    assert result.exit_code == ERROR_STORAGE


def test_state_persists_between_invocations(data_file):
    _invoke("tasks", "add", "A")
    manager = FileBackedTaskManager.load_from_file(data_file)
    assert [t.name for t in manager.get_all_tasks()] == ["A"]
