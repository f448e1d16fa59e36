"""In-memory task store engine.

The engine owns the task, epic and subtask maps together with the schedule
index and the view history, and is the only code that mutates derived epic
state. Callers always receive copies of stored records, so nothing outside
the engine can reorder the schedule index or edit an epic's derived fields.
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable, Iterable
from datetime import timedelta
from typing import TypeVar

from tasktracker.core.history import HistoryManager, RecencyTracker
from tasktracker.core.schedule import ScheduleIndex
from tasktracker.exceptions import NotFoundError
from tasktracker.models import Epic, Status, Subtask, Task

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Task)
F = TypeVar("F", bound=Callable)


def synchronized(method: F) -> F:
    """Run a method under the instance's re-entrant lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _detach(task: T) -> T:
    return task.model_copy(deep=True)


def _detach_as(task: Task, model: type[T]) -> T:
    """Private copy of ``task`` of exactly ``model``, dropping other kinds' fields.

    Keeps an Epic or Subtask handed to the plain-task operations from landing
    in the task map under its own kind.
    """
    if type(task) is model:
        return _detach(task)
    return model.model_validate(task.model_dump(include=set(model.model_fields)))


def derive_epic_status(statuses: Iterable[Status]) -> Status:
    """Epic status for the given subtask statuses.

    No subtasks or only NEW ones gives NEW, only DONE ones gives DONE, and
    any other mix gives IN_PROGRESS.
    """
    distinct = set(statuses)
    if not distinct or distinct == {Status.NEW}:
        return Status.NEW
    if distinct == {Status.DONE}:
        return Status.DONE
    return Status.IN_PROGRESS


class TaskManager:
    """Store for tasks, epics and subtasks.

    All public methods are serialized behind a single re-entrant lock, since
    even reads by id record a view in the history.
    """

    def __init__(self, history: HistoryManager | None = None):
        """Initialize an empty store.

        Args:
            history: View-history implementation; a RecencyTracker by default
        """
        self._tasks: dict[int, Task] = {}
        self._epics: dict[int, Epic] = {}
        self._subtasks: dict[int, Subtask] = {}
        self._history: HistoryManager = history if history is not None else RecencyTracker()
        self._schedule = ScheduleIndex()
        self._id_seq = 0
        self._lock = threading.RLock()

    def _on_change(self) -> None:
        """Hook invoked after every successful mutation."""

    def _next_id(self) -> int:
        return self._id_seq + 1

    def _commit_id(self, task_id: int) -> None:
        self._id_seq = max(self._id_seq, task_id)

    # ---- tasks ----

    @synchronized
    def get_all_tasks(self) -> list[Task]:
        return [_detach(task) for task in self._tasks.values()]

    @synchronized
    def add_task(self, task: Task) -> Task:
        """Add a task and assign its id.

        Raises:
            ValidationError: If the task's interval overlaps a scheduled one
        """
        stored = _detach_as(task, Task)
        stored.id = self._next_id()
        if stored.has_start_time:
            self._schedule.check_conflict(stored)
            self._schedule.insert(stored)
        self._commit_id(stored.id)
        self._tasks[stored.id] = stored
        logger.debug("Task added id=%s start=%s", stored.id, stored.start_time)
        self._on_change()
        return _detach(stored)

    @synchronized
    def get_task_by_id(self, task_id: int) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFoundError(f"task id:{task_id} not found")
        self._history.add(task)
        self._on_change()
        return _detach(task)

    @synchronized
    def update_task(self, task: Task) -> Task:
        """Replace a stored task, keeping its id.

        Raises:
            NotFoundError: If no task has the given id
            ValidationError: If the new interval overlaps another scheduled one
        """
        old = self._tasks.get(task.id)
        if old is None:
            raise NotFoundError(f"task id:{task.id} not found")
        new = _detach_as(task, Task)
        self._reschedule(old, new)
        self._tasks[new.id] = new
        self._history.replace(new)
        logger.debug("Task updated id=%s", new.id)
        self._on_change()
        return _detach(new)

    @synchronized
    def delete_task_by_id(self, task_id: int) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFoundError(f"task id:{task_id} not found")
        self._evict(task)
        del self._tasks[task_id]
        logger.debug("Task deleted id=%s", task_id)
        self._on_change()
        return _detach(task)

    @synchronized
    def delete_all_tasks(self) -> None:
        for task in self._tasks.values():
            self._evict(task)
        self._tasks.clear()
        logger.debug("All tasks deleted")
        self._on_change()

    # ---- subtasks ----

    @synchronized
    def get_all_subtasks(self) -> list[Subtask]:
        return [_detach(subtask) for subtask in self._subtasks.values()]

    @synchronized
    def add_subtask(self, subtask: Subtask, epic_id: int | None = None) -> Subtask:
        """Add a subtask to an existing epic.

        Args:
            subtask: Subtask to add
            epic_id: Parent epic; defaults to ``subtask.epic_id``

        Raises:
            NotFoundError: If the parent epic does not exist
            ValidationError: If the subtask's interval overlaps a scheduled one
        """
        stored = _detach_as(subtask, Subtask)
        if epic_id is not None:
            stored.epic_id = epic_id
        epic = self._epics.get(stored.epic_id)
        if epic is None:
            raise NotFoundError(f"epic id:{stored.epic_id} not found")
        stored.id = self._next_id()
        if stored.has_start_time:
            self._schedule.check_conflict(stored)
            self._schedule.insert(stored)
        self._commit_id(stored.id)
        self._subtasks[stored.id] = stored
        epic.subtask_ids.append(stored.id)
        self._refresh_epic(epic)
        logger.debug("Subtask added id=%s epic=%s", stored.id, epic.id)
        self._on_change()
        return _detach(stored)

    @synchronized
    def get_subtask_by_id(self, subtask_id: int) -> Subtask:
        subtask = self._subtasks.get(subtask_id)
        if subtask is None:
            raise NotFoundError(f"subtask id:{subtask_id} not found")
        self._history.add(subtask)
        self._on_change()
        return _detach(subtask)

    @synchronized
    def update_subtask(self, subtask: Subtask) -> Subtask:
        """Replace a stored subtask and re-derive its epic.

        The parent epic cannot change; the stored epic id is always kept.

        Raises:
            NotFoundError: If no subtask has the given id
            ValidationError: If the new interval overlaps another scheduled one
        """
        old = self._subtasks.get(subtask.id)
        if old is None:
            raise NotFoundError(f"subtask id:{subtask.id} not found")
        new = _detach_as(subtask, Subtask)
        new.epic_id = old.epic_id
        self._reschedule(old, new)
        self._subtasks[new.id] = new
        self._history.replace(new)
        self._refresh_epic(self._epics[new.epic_id])
        logger.debug("Subtask updated id=%s", new.id)
        self._on_change()
        return _detach(new)

    @synchronized
    def delete_subtask_by_id(self, subtask_id: int) -> Subtask:
        subtask = self._subtasks.get(subtask_id)
        if subtask is None:
            raise NotFoundError(f"subtask id:{subtask_id} not found")
        epic = self._epics[subtask.epic_id]
        epic.subtask_ids.remove(subtask_id)
        self._drop_subtask(subtask_id)
        self._refresh_epic(epic)
        logger.debug("Subtask deleted id=%s", subtask_id)
        self._on_change()
        return _detach(subtask)

    @synchronized
    def delete_all_subtasks(self) -> None:
        for subtask in self._subtasks.values():
            self._evict(subtask)
        self._subtasks.clear()
        for epic in self._epics.values():
            epic.subtask_ids.clear()
            self._refresh_epic(epic)
        logger.debug("All subtasks deleted")
        self._on_change()

    # ---- epics ----

    @synchronized
    def get_all_epics(self) -> list[Epic]:
        return [_detach(epic) for epic in self._epics.values()]

    @synchronized
    def add_epic(self, epic: Epic) -> Epic:
        """Add an epic with no subtasks.

        Status and time fields supplied by the caller are discarded.
        """
        stored = Epic(name=epic.name, description=epic.description, id=self._next_id())
        self._commit_id(stored.id)
        self._epics[stored.id] = stored
        self._refresh_epic(stored)
        logger.debug("Epic added id=%s", stored.id)
        self._on_change()
        return _detach(stored)

    @synchronized
    def get_epic_by_id(self, epic_id: int) -> Epic:
        epic = self._epics.get(epic_id)
        if epic is None:
            raise NotFoundError(f"epic id:{epic_id} not found")
        self._history.add(epic)
        self._on_change()
        return _detach(epic)

    @synchronized
    def update_epic(self, epic: Epic) -> Epic:
        """Rename or re-describe an epic. Derived fields are recomputed."""
        stored = self._epics.get(epic.id)
        if stored is None:
            raise NotFoundError(f"epic id:{epic.id} not found")
        stored.name = epic.name
        stored.description = epic.description
        self._refresh_epic(stored)
        logger.debug("Epic updated id=%s", stored.id)
        self._on_change()
        return _detach(stored)

    @synchronized
    def delete_epic_by_id(self, epic_id: int) -> Epic:
        """Delete an epic together with all of its subtasks."""
        epic = self._epics.get(epic_id)
        if epic is None:
            raise NotFoundError(f"epic id:{epic_id} not found")
        for subtask_id in epic.subtask_ids:
            self._drop_subtask(subtask_id)
        self._history.remove(epic_id)
        del self._epics[epic_id]
        logger.debug("Epic deleted id=%s with %d subtasks", epic_id, len(epic.subtask_ids))
        self._on_change()
        return _detach(epic)

    @synchronized
    def delete_all_epics(self) -> None:
        """Delete every epic; subtasks cannot outlive them and go too."""
        for epic_id in self._epics:
            self._history.remove(epic_id)
        self._epics.clear()
        for subtask in self._subtasks.values():
            self._evict(subtask)
        self._subtasks.clear()
        logger.debug("All epics and subtasks deleted")
        self._on_change()

    @synchronized
    def get_epic_subtasks(self, epic_id: int) -> list[Subtask]:
        epic = self._epics.get(epic_id)
        if epic is None:
            raise NotFoundError(f"epic id:{epic_id} not found")
        return [_detach(self._subtasks[subtask_id]) for subtask_id in epic.subtask_ids]

    # ---- views ----

    @synchronized
    def get_prioritized_tasks(self) -> list[Task]:
        """Scheduled tasks and subtasks ordered by start, duration and id."""
        return [_detach(task) for task in self._schedule.snapshot()]

    @synchronized
    def get_history(self) -> list[Task]:
        """Viewed entities, least recently viewed first."""
        return [_detach(task) for task in self._history.get_history()]

    # ---- internals ----

    def _reschedule(self, old: Task, new: Task) -> None:
        # The conflict check must pass before the old interval is dropped.
        if new.has_start_time:
            self._schedule.check_conflict(new)
        if old.has_start_time:
            self._schedule.remove(old)
        if new.has_start_time:
            self._schedule.insert(new)

    def _evict(self, task: Task) -> None:
        if task.has_start_time:
            self._schedule.remove(task)
        self._history.remove(task.id)

    def _drop_subtask(self, subtask_id: int) -> None:
        self._evict(self._subtasks.pop(subtask_id))

    def _refresh_epic(self, epic: Epic) -> None:
        subtasks = [self._subtasks[subtask_id] for subtask_id in epic.subtask_ids]
        epic.status = derive_epic_status(subtask.status for subtask in subtasks)

        scheduled = [subtask for subtask in subtasks if subtask.has_start_time]
        if not scheduled:
            epic.start_time = None
            epic.duration = timedelta(0)
            return
        start = min(subtask.start_time for subtask in scheduled)
        end = max(subtask.end_time for subtask in scheduled)
        epic.start_time = start
        epic.duration = end - start
