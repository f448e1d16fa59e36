"""Subtask management commands."""

from typing import Optional

import typer

from tasktracker.models import Subtask
from tasktracker.services.manager_service import get_task_manager
from tasktracker.utils.typer_helpers import SuggestingGroup
from tasktracker.utils.ui.formatters import format_info, format_success, format_tasks

from .decorators import command_wrapper
from .utils import find_by_id, parse_duration, parse_start, parse_status, resolve_output

app = typer.Typer(cls=SuggestingGroup, help="Subtask management commands")


@app.command("list")
@command_wrapper
def list_subtasks(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """List subtasks."""
    manager = get_task_manager(profile)
    format_tasks(manager.get_all_subtasks(), resolve_output(output, profile))


@app.command("get")
@command_wrapper
def get_subtask(
    subtask_id: int = typer.Argument(..., help="Subtask ID"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Show a subtask and record the view in history."""
    manager = get_task_manager(profile)
    format_tasks(manager.get_subtask_by_id(subtask_id), resolve_output(output, profile))


@app.command("add")
@command_wrapper
def add_subtask(
    epic_id: int = typer.Argument(..., help="Parent epic ID"),
    name: str = typer.Argument(..., help="Subtask name"),
    description: str = typer.Option("", "--description", "-d", help="Subtask description"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="NEW, IN_PROGRESS or DONE"),
    start: Optional[str] = typer.Option(None, "--start", help="Start time (ISO 8601)"),
    duration: Optional[int] = typer.Option(None, "--duration", help="Duration in minutes"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Add a subtask to an epic."""
    subtask = Subtask(name=name, description=description, epic_id=epic_id)
    if (parsed_status := parse_status(status)) is not None:
        subtask.status = parsed_status
    subtask.start_time = parse_start(start)
    if (parsed_duration := parse_duration(duration)) is not None:
        subtask.duration = parsed_duration

    created = get_task_manager(profile).add_subtask(subtask)
    format_success(f"Subtask created: {created.id} (epic {created.epic_id})")


@app.command("update")
@command_wrapper
def update_subtask(
    subtask_id: int = typer.Argument(..., help="Subtask ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="NEW, IN_PROGRESS or DONE"),
    start: Optional[str] = typer.Option(None, "--start", help="Start time (ISO 8601)"),
    duration: Optional[int] = typer.Option(None, "--duration", help="Duration in minutes"),
    unschedule: bool = typer.Option(False, "--unschedule", help="Clear the start time"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Update a subtask. Its epic is re-derived afterwards."""
    manager = get_task_manager(profile)
    subtask = find_by_id(manager.get_all_subtasks(), subtask_id, "subtask")

    if name is not None:
        subtask.name = name
    if description is not None:
        subtask.description = description
    if (parsed_status := parse_status(status)) is not None:
        subtask.status = parsed_status
    if unschedule:
        subtask.start_time = None
    elif (parsed_start := parse_start(start)) is not None:
        subtask.start_time = parsed_start
    if (parsed_duration := parse_duration(duration)) is not None:
        subtask.duration = parsed_duration

    manager.update_subtask(subtask)
    format_success(f"Subtask updated: {subtask_id}")


@app.command("delete")
@command_wrapper
def delete_subtask(
    subtask_id: int = typer.Argument(..., help="Subtask ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Delete a subtask."""
    manager = get_task_manager(profile)
    subtask = find_by_id(manager.get_all_subtasks(), subtask_id, "subtask")

    if not force:
        confirm = typer.confirm(f"Delete subtask '{subtask.name}'?")
        if not confirm:
            format_info("Cancelled")
            raise typer.Exit(0)

    manager.delete_subtask_by_id(subtask_id)
    format_success(f"Subtask deleted: {subtask_id}")


@app.command("clear")
@command_wrapper
def clear_subtasks(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Delete every subtask. Epics are kept and reset to NEW."""
    if not yes:
        confirm = typer.confirm("Delete all subtasks?")
        if not confirm:
            format_info("Cancelled")
            raise typer.Exit(0)

    get_task_manager(profile).delete_all_subtasks()
    format_success("All subtasks deleted")
