"""
Exit codes for the TaskTracker CLI.

Each failure kind raised by the task store maps to its own exit code so
scripts can tell a missing id from a scheduling conflict.
"""

from tasktracker.exceptions import NotFoundError, StorageIOError, ValidationError

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments
ERROR_INVALID_ARGS = 2

# Resource not found
ERROR_NOT_FOUND = 5

# Scheduling conflict with an existing task
ERROR_CONFLICT = 7

# Task file could not be read or written
ERROR_STORAGE = 8


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
        ERROR_CONFLICT: "ERROR_CONFLICT",
        ERROR_STORAGE: "ERROR_STORAGE",
    }
    return code_names.get(code, f"UNKNOWN({code})")


def exit_code_for(error: Exception) -> int:
    """Map an exception raised by a command to its exit code."""
    if isinstance(error, NotFoundError):
        return ERROR_NOT_FOUND
    if isinstance(error, ValidationError):
        return ERROR_CONFLICT
    if isinstance(error, StorageIOError):
        return ERROR_STORAGE
    return ERROR_GENERAL
