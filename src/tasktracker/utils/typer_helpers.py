"""Typer helper utilities."""

from difflib import get_close_matches

import typer
from typer.core import TyperGroup

from tasktracker.utils.ui.console import get_console


def suggest_commands(attempted: str, available: list[str], limit: int = 3) -> list[str]:
    """Command names close to a mistyped one, best match first."""
    return get_close_matches(attempted, available, n=limit, cutoff=0.6)


class SuggestingGroup(TyperGroup):
    """Command group that answers an unknown subcommand with close matches."""

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except Exception as e:
            suggestions = suggest_commands(args[0], list(self.commands)) if args else []
            if not suggestions:
                raise

            console = get_console()
            console.print(f'[red]Error:[/red] no command "{args[0]}" in "{ctx.info_name}"')
            console.print()
            heading = "Did you mean this?" if len(suggestions) == 1 else "Did you mean one of these?"
            console.print(f"[yellow]{heading}[/yellow]")
            for suggestion in suggestions:
                console.print(f"    {ctx.info_name} {suggestion}")
            raise typer.Exit(1) from e
