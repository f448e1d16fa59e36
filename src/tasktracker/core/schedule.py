"""Time-ordered index of scheduled tasks and subtasks."""

from __future__ import annotations

import bisect
import logging
from datetime import datetime, timedelta

from tasktracker.exceptions import ValidationError
from tasktracker.models import Task

logger = logging.getLogger(__name__)

ScheduleKey = tuple[datetime, timedelta, int]


def schedule_key(task: Task) -> ScheduleKey:
    """Sort key: start time, then duration, then id."""
    if task.start_time is None:
        raise ValueError(f"task id:{task.id} has no start time and cannot be scheduled")
    return task.start_time, task.duration, task.id


def intervals_overlap(first: Task, second: Task) -> bool:
    """Half-open overlap test; intervals that only touch do not overlap."""
    return first.start_time < second.end_time and first.end_time > second.start_time


class ScheduleIndex:
    """Sorted collection of every time-bearing task and subtask.

    Epics are never indexed. Entries are kept ordered by ``schedule_key`` so
    ``snapshot()`` is the prioritized listing without any sorting at read time.
    """

    def __init__(self) -> None:
        self._keys: list[ScheduleKey] = []
        self._tasks: list[Task] = []

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return any(task.id == task_id for task in self._tasks)

    def insert(self, task: Task) -> None:
        key = schedule_key(task)
        pos = bisect.bisect_right(self._keys, key)
        self._keys.insert(pos, key)
        self._tasks.insert(pos, task)

    def remove(self, task: Task) -> None:
        """Remove the indexed entry with the task's id, if present."""
        pos = self._find(task)
        if pos is not None:
            del self._keys[pos]
            del self._tasks[pos]

    def check_conflict(self, candidate: Task) -> None:
        """Fail if the candidate's interval overlaps any indexed interval.

        An indexed entry with the candidate's own id is skipped, so an
        update is only checked against the other scheduled entities.

        Raises:
            ValidationError: On the first overlapping entry found
        """
        if candidate.start_time is None:
            return
        for existing in self._tasks:
            if existing.id == candidate.id:
                continue
            if intervals_overlap(candidate, existing):
                logger.info(
                    "Rejected id:%s %s-%s, overlaps id:%s",
                    candidate.id,
                    candidate.start_time,
                    candidate.end_time,
                    existing.id,
                )
                raise ValidationError(
                    f"{candidate.kind.value.lower()} id:{candidate.id}"
                    f" [{candidate.start_time.isoformat()} - {candidate.end_time.isoformat()})"
                    f" overlaps {existing.kind.value.lower()} id:{existing.id}"
                    f" [{existing.start_time.isoformat()} - {existing.end_time.isoformat()})"
                )

    def snapshot(self) -> list[Task]:
        return list(self._tasks)

    def clear(self) -> None:
        self._keys.clear()
        self._tasks.clear()

    def _find(self, task: Task) -> int | None:
        if task.start_time is not None:
            key = schedule_key(task)
            pos = bisect.bisect_left(self._keys, key)
            if pos < len(self._keys) and self._keys[pos] == key:
                return pos
        # The caller may hold a version whose times differ from the indexed one.
        for pos, indexed in enumerate(self._tasks):
            if indexed.id == task.id:
                return pos
        return None
