"""Tests for output formatters."""

import json
from datetime import datetime, timedelta

import pytest

from tasktracker.models import Epic, Subtask, Task
from tasktracker.utils.ui import formatters
from tasktracker.utils.ui.formatters import format_duration, format_tasks, task_summary


@pytest.mark.parametrize(
    "duration, expected",
    [
        (timedelta(0), "0m"),
        (timedelta(minutes=45), "45m"),
        (timedelta(hours=2), "2h"),
        (timedelta(hours=1, minutes=30), "1h 30m"),
    ],
)
def test_format_duration(duration, expected):
    assert format_duration(duration) == expected


def test_task_summary_for_each_kind():
    task = Task(id=1, name="T", start_time=datetime(2024, 1, 1, 10, 0), duration=timedelta(minutes=90))
    summary = task_summary(task)
    assert summary["start"] == "2024-01-01T10:00"
    assert summary["duration"] == "1h 30m"
    assert "epic" not in summary

    assert task_summary(Subtask(id=2, name="S", epic_id=3))["epic"] == 3
    epic_summary = task_summary(Epic(id=3, name="E", subtask_ids=[2]))
    assert epic_summary["subtasks"] == [2]
    assert epic_summary["start"] is None
    assert epic_summary["duration"] is None


def test_format_tasks_json(capsys):
    format_tasks([Task(id=1, name="T")], "json")
    assert json.loads(capsys.readouterr().out)[0]["name"] == "T"


def test_format_tasks_table(monkeypatch):
    printed = []
    monkeypatch.setattr(formatters.console, "print", lambda *a, **k: printed.extend(a))
    format_tasks([Task(id=1, name="T"), Subtask(id=2, name="S", epic_id=5)], "table")
    table = printed[0]
    headers = [column.header for column in table.columns]
    assert headers == ["Id", "Kind", "Name", "Status", "Start", "Duration", "Epic"]
    assert table.row_count == 2


def test_format_tasks_empty_table(monkeypatch):
    printed = []
    monkeypatch.setattr(formatters.console, "print", lambda *a, **k: printed.extend(a))
    format_tasks([], "table")
    assert "No items found" in printed[0]
