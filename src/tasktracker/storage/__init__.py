"""Durable storage for the task store."""

from .file_backed import CSV_HEADER, FileBackedTaskManager, task_from_row, task_to_row

__all__ = ["CSV_HEADER", "FileBackedTaskManager", "task_from_row", "task_to_row"]
