"""Rich console output helpers for the termline CLI."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from termline.shell.types import PreparedCommandLine

# Diagnostics go to stderr so stdout stays pipeable into a shell.
console = Console(stderr=True)


def print_cli_error(message: str, *, hint: str | None = None) -> None:
    console.print(f"[bold red]✗[/bold red] {escape(message)}")
    if hint:
        console.print(f"  [dim]Hint:[/dim] {escape(hint)}")


def print_cli_warning(message: str) -> None:
    console.print(f"[bold yellow]![/bold yellow] {escape(message)}")


def print_prepared(prepared: PreparedCommandLine) -> None:
    """Summarize a prepared command line on stderr."""
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column(style="dim")
    table.add_column()
    table.add_row("dialect", prepared.dialect.value if prepared.dialect else "unknown")
    table.add_row("quoted", "yes" if prepared.is_safe else "[red]no[/red]")
    console.print(table)
