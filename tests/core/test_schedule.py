"""Tests for the time-ordered schedule index."""

from datetime import datetime, timedelta

import pytest

from tasktracker.core.schedule import ScheduleIndex, intervals_overlap, schedule_key
from tasktracker.exceptions import ValidationError
from tasktracker.models import Subtask, Task

BASE = datetime(2024, 1, 1, 10, 0)


def _task(task_id: int, start: int, minutes: int) -> Task:
    return Task(
        id=task_id,
        name=f"T{task_id}",
        start_time=BASE + timedelta(minutes=start),
        duration=timedelta(minutes=minutes),
    )


@pytest.fixture()
def index() -> ScheduleIndex:
    return ScheduleIndex()


class TestOverlap:
    def test_back_to_back_do_not_overlap(self):
        assert not intervals_overlap(_task(1, 0, 30), _task(2, 30, 30))

    def test_partial_overlap(self):
        assert intervals_overlap(_task(1, 0, 30), _task(2, 15, 30))

    def test_containment_overlaps(self):
        assert intervals_overlap(_task(1, 0, 60), _task(2, 10, 5))

    def test_zero_duration_inside_interval_overlaps(self):
        assert intervals_overlap(_task(1, 10, 0), _task(2, 0, 30))

    def test_zero_duration_at_boundary_does_not_overlap(self):
        assert not intervals_overlap(_task(1, 30, 0), _task(2, 0, 30))


def test_schedule_key_requires_start():
    with pytest.raises(ValueError):
        schedule_key(Task(id=1, name="T"))


def test_snapshot_is_ordered_by_start_duration_id(index):
    late = _task(1, 60, 10)
    long_first = _task(2, 0, 30)
    short_first = _task(4, 0, 10)
    tie = _task(3, 0, 10)
    for task in (late, long_first, short_first, tie):
        index.insert(task)
    assert [task.id for task in index.snapshot()] == [3, 4, 2, 1]


def test_check_conflict_rejects_overlap(index):
    index.insert(_task(1, 0, 30))
    with pytest.raises(ValidationError, match="overlaps task id:1"):
        index.check_conflict(_task(2, 15, 30))


def test_check_conflict_allows_touching(index):
    index.insert(_task(1, 0, 30))
    index.check_conflict(_task(2, 30, 30))
    index.check_conflict(_task(3, -30, 30))


def test_check_conflict_skips_own_id(index):
    index.insert(_task(1, 0, 30))
    index.check_conflict(_task(1, 10, 30))


def test_check_conflict_ignores_unscheduled_candidate(index):
    index.insert(_task(1, 0, 30))
    index.check_conflict(Task(id=2, name="T2"))


def test_conflict_between_task_and_subtask(index):
    index.insert(_task(1, 0, 30))
    subtask = Subtask(
        id=5, name="S", epic_id=4, start_time=BASE + timedelta(minutes=20), duration=timedelta(minutes=5)
    )
    with pytest.raises(ValidationError, match="subtask id:5"):
        index.check_conflict(subtask)


def test_remove_by_current_key(index):
    task = _task(1, 0, 30)
    index.insert(task)
    index.insert(_task(2, 30, 30))
    index.remove(task)
    assert [t.id for t in index.snapshot()] == [2]
    assert 1 not in index


def test_remove_with_stale_times_falls_back_to_id(index):
    index.insert(_task(1, 0, 30))
    index.remove(_task(1, 90, 5))
    assert len(index) == 0


def test_remove_missing_is_noop(index):
    index.insert(_task(1, 0, 30))
    index.remove(_task(9, 0, 30))
    assert len(index) == 1


def test_snapshot_is_independent_and_clear(index):
    index.insert(_task(1, 0, 30))
    index.snapshot().clear()
    assert len(index) == 1
    index.clear()
    assert index.snapshot() == []
