"""Task management commands."""

from typing import Optional

import typer

from tasktracker.models import Task
from tasktracker.services.manager_service import get_task_manager
from tasktracker.utils.typer_helpers import SuggestingGroup
from tasktracker.utils.ui.formatters import format_info, format_success, format_tasks

from .decorators import command_wrapper
from .utils import find_by_id, parse_duration, parse_start, parse_status, resolve_output

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")


@app.command("list")
@command_wrapper
def list_tasks(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """List tasks."""
    manager = get_task_manager(profile)
    format_tasks(manager.get_all_tasks(), resolve_output(output, profile))


@app.command("get")
@command_wrapper
def get_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Show a task and record the view in history."""
    manager = get_task_manager(profile)
    format_tasks(manager.get_task_by_id(task_id), resolve_output(output, profile))


@app.command("add")
@command_wrapper
def add_task(
    name: str = typer.Argument(..., help="Task name"),
    description: str = typer.Option("", "--description", "-d", help="Task description"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="NEW, IN_PROGRESS or DONE"),
    start: Optional[str] = typer.Option(None, "--start", help="Start time (ISO 8601)"),
    duration: Optional[int] = typer.Option(None, "--duration", help="Duration in minutes"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Add a task."""
    task = Task(name=name, description=description)
    if (parsed_status := parse_status(status)) is not None:
        task.status = parsed_status
    task.start_time = parse_start(start)
    if (parsed_duration := parse_duration(duration)) is not None:
        task.duration = parsed_duration

    created = get_task_manager(profile).add_task(task)
    format_success(f"Task created: {created.id}")


@app.command("update")
@command_wrapper
def update_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="NEW, IN_PROGRESS or DONE"),
    start: Optional[str] = typer.Option(None, "--start", help="Start time (ISO 8601)"),
    duration: Optional[int] = typer.Option(None, "--duration", help="Duration in minutes"),
    unschedule: bool = typer.Option(False, "--unschedule", help="Clear the start time"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Update a task. Options not given keep their current value."""
    manager = get_task_manager(profile)
    task = find_by_id(manager.get_all_tasks(), task_id, "task")

    if name is not None:
        task.name = name
    if description is not None:
        task.description = description
    if (parsed_status := parse_status(status)) is not None:
        task.status = parsed_status
    if unschedule:
        task.start_time = None
    elif (parsed_start := parse_start(start)) is not None:
        task.start_time = parsed_start
    if (parsed_duration := parse_duration(duration)) is not None:
        task.duration = parsed_duration

    manager.update_task(task)
    format_success(f"Task updated: {task_id}")


@app.command("delete")
@command_wrapper
def delete_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Delete a task."""
    manager = get_task_manager(profile)
    task = find_by_id(manager.get_all_tasks(), task_id, "task")

    if not force:
        confirm = typer.confirm(f"Delete task '{task.name}'?")
        if not confirm:
            format_info("Cancelled")
            raise typer.Exit(0)

    manager.delete_task_by_id(task_id)
    format_success(f"Task deleted: {task_id}")


@app.command("clear")
@command_wrapper
def clear_tasks(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Delete every task."""
    if not yes:
        confirm = typer.confirm("Delete all tasks?")
        if not confirm:
            format_info("Cancelled")
            raise typer.Exit(0)

    get_task_manager(profile).delete_all_tasks()
    format_success("All tasks deleted")
