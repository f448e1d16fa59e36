"""Exceptions raised by the task store and its collaborators."""


class TaskTrackerError(Exception):
    """Base exception for all TaskTracker errors."""


class NotFoundError(TaskTrackerError):
    """Raised when a task, epic or subtask id is not present in the store."""


class ValidationError(TaskTrackerError):
    """Raised when a time-bearing task would overlap an already scheduled one."""


class StorageIOError(TaskTrackerError):
    """Raised when the backing file cannot be read, written or parsed."""
