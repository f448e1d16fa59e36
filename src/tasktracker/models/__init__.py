"""TaskTracker domain models.

Pydantic models for the three entity kinds held by the task store.
"""

from .task import Epic, Status, Subtask, Task, TaskKind, to_wire

__all__ = [
    "Task",
    "Epic",
    "Subtask",
    "Status",
    "TaskKind",
    "to_wire",
]
