"""TaskTracker - in-memory task, epic and subtask store."""

__version__ = "0.1.0"
