"""Epic management commands."""

from typing import Optional

import typer

from tasktracker.models import Epic
from tasktracker.services.manager_service import get_task_manager
from tasktracker.utils.typer_helpers import SuggestingGroup
from tasktracker.utils.ui.formatters import format_info, format_success, format_tasks

from .decorators import command_wrapper
from .utils import find_by_id, resolve_output

app = typer.Typer(cls=SuggestingGroup, help="Epic management commands")


@app.command("list")
@command_wrapper
def list_epics(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """List epics."""
    manager = get_task_manager(profile)
    format_tasks(manager.get_all_epics(), resolve_output(output, profile))


@app.command("get")
@command_wrapper
def get_epic(
    epic_id: int = typer.Argument(..., help="Epic ID"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Show an epic and record the view in history."""
    manager = get_task_manager(profile)
    format_tasks(manager.get_epic_by_id(epic_id), resolve_output(output, profile))


@app.command("subtasks")
@command_wrapper
def epic_subtasks(
    epic_id: int = typer.Argument(..., help="Epic ID"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """List the subtasks of an epic."""
    manager = get_task_manager(profile)
    format_tasks(manager.get_epic_subtasks(epic_id), resolve_output(output, profile))


@app.command("add")
@command_wrapper
def add_epic(
    name: str = typer.Argument(..., help="Epic name"),
    description: str = typer.Option("", "--description", "-d", help="Epic description"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Add an epic. Its status and time window follow its subtasks."""
    created = get_task_manager(profile).add_epic(Epic(name=name, description=description))
    format_success(f"Epic created: {created.id}")


@app.command("update")
@command_wrapper
def update_epic(
    epic_id: int = typer.Argument(..., help="Epic ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Rename or re-describe an epic."""
    manager = get_task_manager(profile)
    epic = find_by_id(manager.get_all_epics(), epic_id, "epic")
    if name is not None:
        epic.name = name
    if description is not None:
        epic.description = description

    manager.update_epic(epic)
    format_success(f"Epic updated: {epic_id}")


@app.command("delete")
@command_wrapper
def delete_epic(
    epic_id: int = typer.Argument(..., help="Epic ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Delete an epic and all of its subtasks."""
    manager = get_task_manager(profile)
    epic = find_by_id(manager.get_all_epics(), epic_id, "epic")

    if not force:
        count = len(epic.subtask_ids)
        confirm = typer.confirm(f"Delete epic '{epic.name}' and its {count} subtask(s)?")
        if not confirm:
            format_info("Cancelled")
            raise typer.Exit(0)

    manager.delete_epic_by_id(epic_id)
    format_success(f"Epic deleted: {epic_id}")


@app.command("clear")
@command_wrapper
def clear_epics(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Delete every epic together with every subtask."""
    if not yes:
        confirm = typer.confirm("Delete all epics and subtasks?")
        if not confirm:
            format_info("Cancelled")
            raise typer.Exit(0)

    get_task_manager(profile).delete_all_epics()
    format_success("All epics deleted")
