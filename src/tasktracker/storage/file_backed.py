"""File-backed task store.

Every mutation rewrites a CSV file holding one record per entity, a blank
line, and the view history as a single line of ids:

    id,type,name,status,description,epic,start_time,duration
    1,TASK,Task 1,NEW,Description,,2024-01-01T10:00:00,1800
    2,EPIC,Epic 1,NEW,Description,,,
    3,SUBTASK,Subtask 1,NEW,Description,2,,0

    1,3
"""

from __future__ import annotations

import contextlib
import csv
import logging
import os
from collections.abc import Iterable
from datetime import datetime, timedelta
from pathlib import Path

from tasktracker.core.history import HistoryManager
from tasktracker.core.manager import TaskManager
from tasktracker.exceptions import StorageIOError
from tasktracker.models import Epic, Status, Subtask, Task, TaskKind

logger = logging.getLogger(__name__)

CSV_HEADER = ["id", "type", "name", "status", "description", "epic", "start_time", "duration"]


def _format_seconds(duration: timedelta) -> str:
    seconds = duration.total_seconds()
    return str(int(seconds)) if seconds.is_integer() else repr(seconds)


def task_to_row(task: Task) -> list[str]:
    """Serialize one entity to a CSV row.

    Epic time fields are derived and therefore left empty.
    """
    epic_id = str(task.epic_id) if isinstance(task, Subtask) else ""
    if isinstance(task, Epic):
        start_time = duration = ""
    else:
        start_time = task.start_time.isoformat() if task.start_time is not None else ""
        duration = _format_seconds(task.duration)
    return [
        str(task.id),
        task.kind.value,
        task.name,
        task.status.value,
        task.description,
        epic_id,
        start_time,
        duration,
    ]


def task_from_row(row: list[str]) -> Task:
    """Parse a CSV row produced by ``task_to_row``.

    Rows written without the time columns are accepted and load as
    unscheduled entities.

    Raises:
        ValueError: If a field cannot be parsed
    """
    if len(row) < 5:
        raise ValueError(f"expected at least 5 fields, got {len(row)}")
    fields = row + [""] * (len(CSV_HEADER) - len(row))
    raw_id, raw_kind, name, raw_status, description, raw_epic, raw_start, raw_duration = fields[
        : len(CSV_HEADER)
    ]

    common = {
        "id": int(raw_id),
        "name": name,
        "description": description,
        "status": Status(raw_status),
        "start_time": datetime.fromisoformat(raw_start) if raw_start else None,
        "duration": timedelta(seconds=float(raw_duration)) if raw_duration else timedelta(0),
    }
    kind = TaskKind(raw_kind)
    if kind is TaskKind.SUBTASK:
        return Subtask(epic_id=int(raw_epic), **common)
    if kind is TaskKind.EPIC:
        return Epic(**common)
    return Task(**common)


def history_to_row(history: Iterable[Task]) -> list[str]:
    return [str(task.id) for task in history]


def history_from_row(row: list[str]) -> list[int]:
    return [int(field) for field in row if field.strip()]


class FileBackedTaskManager(TaskManager):
    """Task store that overwrites its backing file after every change.

    Use ``load_from_file`` to restore a store from a previously saved file.
    """

    def __init__(self, path: str | Path, history: HistoryManager | None = None):
        super().__init__(history)
        self.path = Path(path)

    @classmethod
    def load_from_file(
        cls, path: str | Path, history: HistoryManager | None = None
    ) -> FileBackedTaskManager:
        """Create a store from a saved file; a missing file gives an empty store.

        Raises:
            StorageIOError: If the file cannot be read or holds malformed records
        """
        manager = cls(path, history)
        manager._load()
        return manager

    def _on_change(self) -> None:
        self.save()

    def save(self) -> None:
        """Write all records and the view history to the backing file.

        Raises:
            StorageIOError: If the file cannot be written
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8", newline="") as f:
                writer = csv.writer(f, lineterminator="\n")
                writer.writerow(CSV_HEADER)
                for task in self._all_records():
                    writer.writerow(task_to_row(task))
                f.write("\n")
                writer.writerow(history_to_row(self._history.get_history()))
            os.replace(tmp_path, self.path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise StorageIOError(f"Failed to save tasks to {self.path}: {e}") from e
        logger.debug("Saved task store to %s", self.path)

    def _all_records(self) -> list[Task]:
        return [*self._tasks.values(), *self._epics.values(), *self._subtasks.values()]

    def _load(self) -> None:
        if not self.path.exists():
            logger.info("No task file at %s, starting empty", self.path)
            return

        records: list[Task] = []
        history_ids: list[int] = []
        try:
            with open(self.path, encoding="utf-8", newline="") as f:
                reader = csv.reader(f)
                next(reader, None)
                for line_no, row in enumerate(reader, start=2):
                    if not any(field.strip() for field in row):
                        break
                    try:
                        records.append(task_from_row(row))
                    except ValueError as e:
                        raise StorageIOError(
                            f"Malformed record on line {line_no} of {self.path}: {e}"
                        ) from e
                history_row = next(reader, None)
                if history_row:
                    history_ids = history_from_row(history_row)
        except OSError as e:
            raise StorageIOError(f"Failed to load tasks from {self.path}: {e}") from e
        except ValueError as e:
            raise StorageIOError(f"Malformed history line in {self.path}: {e}") from e

        self._restore(records, history_ids)
        logger.info("Loaded %d records from %s", len(records), self.path)

    def _restore(self, records: list[Task], history_ids: list[int]) -> None:
        seen: set[int] = set()
        for task in records:
            if task.id in seen:
                raise StorageIOError(f"Duplicate id:{task.id} in {self.path}")
            seen.add(task.id)
            if isinstance(task, Epic):
                self._epics[task.id] = task
            elif isinstance(task, Subtask):
                self._subtasks[task.id] = task
            else:
                self._tasks[task.id] = task

        for subtask in self._subtasks.values():
            epic = self._epics.get(subtask.epic_id)
            if epic is None:
                raise StorageIOError(
                    f"Subtask id:{subtask.id} references unknown epic id:{subtask.epic_id}"
                )
            epic.subtask_ids.append(subtask.id)

        for task in [*self._tasks.values(), *self._subtasks.values()]:
            if task.has_start_time:
                self._schedule.insert(task)
        for epic in self._epics.values():
            self._refresh_epic(epic)

        self._id_seq = max(seen, default=0)

        for task_id in history_ids:
            task = self._tasks.get(task_id) or self._epics.get(task_id) or self._subtasks.get(task_id)
            if task is None:
                logger.warning("Skipping unknown id:%s in saved history", task_id)
                continue
            self._history.add(task)
