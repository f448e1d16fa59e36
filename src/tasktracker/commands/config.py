"""Configuration management commands."""

from typing import Any, Optional

import typer

from tasktracker.config import get_config_manager
from tasktracker.utils.typer_helpers import SuggestingGroup
from tasktracker.utils.ui.console import get_console
from tasktracker.utils.ui.formatters import format_error, format_info, format_output, format_success

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")
console = get_console()


def coerce_value(raw: str) -> Any:
    """Turn a command-line string into a bool or int where it looks like one."""
    if raw.lower() in ("true", "false"):
        return raw.lower() == "true"
    if raw.isdigit():
        return int(raw)
    return raw


@app.command("view")
@command_wrapper
def view_config(
    profile: str = typer.Option("default", "--profile", help="Profile name"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show the profile's settings and the task file in use."""
    manager = get_config_manager(profile)
    settings = manager.config.model_dump()
    settings["data_file_path"] = str(manager.data_file_path())
    format_output(settings, output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Dotted key, e.g. server.port"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Print one setting."""
    value = get_config_manager(profile).get(key)
    if value is None:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(1)
    console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Dotted key, e.g. server.port"),
    value: str = typer.Argument(..., help="New value"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Change one setting. Invalid values leave the file untouched."""
    parsed = coerce_value(value)
    get_config_manager(profile).set(key, parsed)
    format_success(f"{key} = {parsed!r}")


@app.command("reset")
@command_wrapper
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Dotted key; omit to reset everything"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Restore defaults for one setting or the whole profile."""
    target = f"'{key}'" if key else f"every setting in profile '{profile}'"
    if not yes and not typer.confirm(f"Reset {target}?"):
        format_info("Cancelled")
        raise typer.Exit(0)

    get_config_manager(profile).reset(key)
    format_success(f"Reset {target} to default")


@app.command("list")
@command_wrapper
def list_profiles(
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """List saved profiles; the active one is starred."""
    profiles = get_config_manager(profile).list_profiles()
    if not profiles:
        console.print("[yellow]No profiles found[/yellow]")
        return
    for name in profiles:
        console.print(f"{name} *" if name == profile else name)
