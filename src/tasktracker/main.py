"""Main entry point for the TaskTracker CLI."""

from typing import Optional

import typer

from tasktracker import __version__
from tasktracker.commands import config, epics, subtasks, tasks
from tasktracker.commands.decorators import command_wrapper
from tasktracker.commands.utils import resolve_output
from tasktracker.config import get_config_manager
from tasktracker.services.manager_service import get_task_manager
from tasktracker.utils.typer_helpers import SuggestingGroup
from tasktracker.utils.ui.console import get_console
from tasktracker.utils.ui.formatters import format_info, format_tasks

# Create main app with custom group class
app = typer.Typer(
    name="tasktracker",
    cls=SuggestingGroup,
    help="Tasks, epics and subtasks with conflict-free scheduling",
    no_args_is_help=True,
)

console = get_console()


# Add subcommands
app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(epics.app, name="epics", help="Epic management commands")
app.add_typer(subtasks.app, name="subtasks", help="Subtask management commands")
app.add_typer(config.app, name="config", help="Configuration management")


# Add top-level commands
@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]TaskTracker[/bold] version [cyan]{__version__}[/cyan]")


@app.command()
@command_wrapper
def history(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Show recently viewed entities, oldest first."""
    manager = get_task_manager(profile)
    format_tasks(manager.get_history(), resolve_output(output, profile))


@app.command()
@command_wrapper
def prioritized(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Show scheduled tasks and subtasks in start-time order."""
    manager = get_task_manager(profile)
    format_tasks(manager.get_prioritized_tasks(), resolve_output(output, profile))


@app.command()
@command_wrapper
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Serve the task store over HTTP."""
    import uvicorn

    from tasktracker.api import create_app

    server_config = get_config_manager(profile).config.server
    host = host or server_config.host
    port = port or server_config.port

    manager = get_task_manager(profile)
    format_info(f"Serving {manager.path} on http://{host}:{port}")
    uvicorn.run(create_app(manager), host=host, port=port)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
