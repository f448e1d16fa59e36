"""Decorators for command functions."""

import functools
import time
import traceback
from collections.abc import Callable

import typer

from tasktracker.exceptions import TaskTrackerError
from tasktracker.utils.exit_codes import exit_code_for
from tasktracker.utils.logger import get_logger
from tasktracker.utils.ui.formatters import format_error


def command_wrapper(func: Callable) -> Callable:
    """Log command timing and turn store errors into exit codes."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            result = func(*args, **kwargs)
            elapsed = time.monotonic() - start
            logger.info("command completed: %s (%.3fs)", cmd, elapsed)
            return result

        except TaskTrackerError as e:
            elapsed = time.monotonic() - start
            logger.error("command failed: %s (%.3fs) - %s", cmd, elapsed, str(e))
            format_error(str(e))
            raise typer.Exit(code=exit_code_for(e)) from e

        except (typer.Exit, typer.BadParameter):
            # Typer's own exits and usage errors keep their exit codes
            raise

        except Exception as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                elapsed,
                str(e),
                traceback.format_exc(),
            )
            format_error(f"An unexpected error occurred: {str(e)}")
            raise typer.Exit(code=1) from e

    return wrapper
