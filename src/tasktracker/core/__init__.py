"""Task store engine and its indexes."""

from .history import HistoryManager, RecencyTracker
from .manager import TaskManager, derive_epic_status
from .schedule import ScheduleIndex

__all__ = [
    "HistoryManager",
    "RecencyTracker",
    "ScheduleIndex",
    "TaskManager",
    "derive_epic_status",
]
