"""Output formatters for different formats."""

import json
from datetime import timedelta
from typing import Any

import yaml
from rich.table import Table

from tasktracker.models import Epic, Status, Subtask, Task, to_wire
from tasktracker.utils.ui.console import get_console

console = get_console()

STATUS_STYLES = {
    Status.NEW.value: "cyan",
    Status.IN_PROGRESS.value: "yellow",
    Status.DONE.value: "green",
}


def format_duration(duration: timedelta) -> str:
    """Render a duration as e.g. ``1h 30m``."""
    total_minutes = int(duration.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours and minutes:
        return f"{hours}h {minutes}m"
    if hours:
        return f"{hours}h"
    return f"{minutes}m"


def task_summary(task: Task) -> dict[str, Any]:
    """Flatten a task into the columns shown by table output."""
    summary: dict[str, Any] = {
        "id": task.id,
        "kind": task.kind.value,
        "name": task.name,
        "status": task.status.value,
        "start": task.start_time.isoformat(timespec="minutes") if task.start_time else None,
        "duration": format_duration(task.duration) if task.has_start_time else None,
    }
    if isinstance(task, Subtask):
        summary["epic"] = task.epic_id
    if isinstance(task, Epic):
        summary["subtasks"] = task.subtask_ids
    return summary


def format_tasks(tasks: Task | list[Task], output_format: str = "table") -> None:
    """Display one or many tasks in the requested format."""
    if output_format in ("json", "yaml"):
        format_output(to_wire(tasks), output_format)
    elif isinstance(tasks, list):
        format_dict_table([task_summary(task) for task in tasks])
    else:
        item = task_summary(tasks)
        item["description"] = tasks.description
        format_single_item(item)


def format_output(data: Any, output_format: str = "table") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    elif isinstance(data, list):
        format_dict_table(data)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if value is None:
        return "-"
    return str(value)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    # Union of keys keeps subtask/epic-only columns when kinds are mixed
    columns: list[str] = []
    for item in items:
        for key in item:
            if key not in columns:
                columns.append(key)

    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())

    for item in items:
        row = []
        for col in columns:
            value = _cell(item.get(col))
            if col == "status" and value in STATUS_STYLES:
                value = f"[{STATUS_STYLES[value]}]{value}[/{STATUS_STYLES[value]}]"
            row.append(value)
        table.add_row(*row)

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), _cell(value))

    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")
