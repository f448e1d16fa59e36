"""Helpers shared by the task, epic and subtask commands."""

from datetime import datetime, timedelta
from typing import TypeVar

import typer

from tasktracker.config import get_config_manager
from tasktracker.exceptions import NotFoundError
from tasktracker.models import Status, Task

T = TypeVar("T", bound=Task)

OUTPUT_FORMATS = ("table", "json", "yaml")


def resolve_output(output: str | None, profile: str) -> str:
    """Use the explicit format, else the profile's configured one."""
    if output is None:
        output = get_config_manager(profile).get("output.format") or "table"
    if output not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"unknown output format '{output}', expected one of {', '.join(OUTPUT_FORMATS)}"
        )
    return output


def parse_status(value: str | None) -> Status | None:
    if value is None:
        return None
    try:
        return Status(value.upper().replace("-", "_"))
    except ValueError as e:
        raise typer.BadParameter(f"unknown status '{value}'") from e


def parse_start(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"start must be ISO 8601, got '{value}'") from e


def parse_duration(minutes: int | None) -> timedelta | None:
    if minutes is None:
        return None
    if minutes < 0:
        raise typer.BadParameter("duration must not be negative")
    return timedelta(minutes=minutes)


def find_by_id(items: list[T], item_id: int, kind: str) -> T:
    """Look up a listed entity without recording a view."""
    for item in items:
        if item.id == item_id:
            return item
    raise NotFoundError(f"{kind} id:{item_id} not found")
