"""View history for the task store.

The history keeps every viewed entity exactly once, ordered from the least to
the most recently viewed. Re-viewing an entity moves it to the tail.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from tasktracker.models import Task


class HistoryManager(ABC):
    """Abstract base class for view-history implementations."""

    @abstractmethod
    def add(self, task: Task) -> None:
        """Record that a task was just viewed.

        Args:
            task: Entity that was viewed; tracked by its id
        """
        raise NotImplementedError("HistoryManager.add() must be implemented")

    @abstractmethod
    def remove(self, task_id: int) -> None:
        """Forget a task id. Does nothing if the id is not tracked."""
        raise NotImplementedError("HistoryManager.remove() must be implemented")

    @abstractmethod
    def replace(self, task: Task) -> None:
        """Swap in a newer version of a tracked entity, keeping its position."""
        raise NotImplementedError("HistoryManager.replace() must be implemented")

    @abstractmethod
    def get_history(self) -> list[Task]:
        """Return viewed entities, oldest view first."""
        raise NotImplementedError("HistoryManager.get_history() must be implemented")

    def touch(self, task: Task) -> None:
        self.add(task)

    def snapshot(self) -> list[Task]:
        return self.get_history()


@dataclass(slots=True)
class _Node:
    task: Task
    prev: int | None = None
    next: int | None = None


class RecencyTracker(HistoryManager):
    """Doubly linked recency list with O(1) add, move and remove.

    Nodes live in a dict keyed by entity id and link to each other through
    ids rather than object references, so unlinking a node is a pair of
    dict lookups and the index never outlives the list entry.
    """

    def __init__(self) -> None:
        self._nodes: dict[int, _Node] = {}
        self._head: int | None = None
        self._tail: int | None = None

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._nodes

    def add(self, task: Task) -> None:
        if task.id in self._nodes:
            self._unlink(task.id)
        self._link_last(task)

    def remove(self, task_id: int) -> None:
        if task_id in self._nodes:
            self._unlink(task_id)

    def replace(self, task: Task) -> None:
        node = self._nodes.get(task.id)
        if node is not None:
            node.task = task

    def clear(self) -> None:
        self._nodes.clear()
        self._head = None
        self._tail = None

    def ids(self) -> list[int]:
        result = []
        current = self._head
        while current is not None:
            result.append(current)
            current = self._nodes[current].next
        return result

    def get_history(self) -> list[Task]:
        return [self._nodes[task_id].task for task_id in self.ids()]

    def _link_last(self, task: Task) -> None:
        node = _Node(task=task, prev=self._tail)
        if self._tail is not None:
            self._nodes[self._tail].next = task.id
        else:
            self._head = task.id
        self._tail = task.id
        self._nodes[task.id] = node

    def _unlink(self, task_id: int) -> None:
        node = self._nodes.pop(task_id)
        if node.prev is not None:
            self._nodes[node.prev].next = node.next
        else:
            self._head = node.next
        if node.next is not None:
            self._nodes[node.next].prev = node.prev
        else:
            self._tail = node.prev
