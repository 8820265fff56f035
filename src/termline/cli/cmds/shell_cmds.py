"""
CLI commands for building and inspecting shell command lines.

Usage:
    termline prepare --shell /bin/bash --cwd /tmp -- node -e "console.log(1)"
    termline prepare --shell pwsh --env PATH=/usr/bin --env DEBUG -- make
    termline quote "a b" --dialect cmd --mode weak
    termline detect C:/Windows/System32/cmd.exe
"""

from __future__ import annotations

import json

import typer

from termline.cli.output import print_cli_error, print_cli_warning, print_prepared
from termline.errors import QuotingError
from termline.settings import get_settings
from termline.shell.commandline import build_command_line, detect_dialect, get_quoting_functions
from termline.shell.quoting import ShellQuoting, render_quoted
from termline.shell.types import CommandOptions, Dialect, ShellProcessInfo


def parse_env_option(entries: list[str]) -> list[tuple[str, str | None]]:
    """Turn ``NAME=VALUE`` / ``NAME`` option values into ordered env changes.

    ``NAME=`` sets an empty value; a bare ``NAME`` unsets the variable.

    Raises:
        typer.BadParameter: An entry has an empty name.
    """
    changes: list[tuple[str, str | None]] = []
    for entry in entries:
        name, sep, value = entry.partition("=")
        if not name:
            raise typer.BadParameter(f"Missing variable name in {entry!r}", param_hint="--env")
        changes.append((name, value if sep else None))
    return changes


def prepare_cmd(
    args: list[str] | None = typer.Argument(
        None,
        help="Program and its arguments (put them after --)",
    ),
    shell: str | None = typer.Option(
        None,
        "--shell",
        "-s",
        help="Shell executable that will receive the line (default: TERMLINE_SHELL)",
    ),
    cwd: str | None = typer.Option(
        None,
        "--cwd",
        "-C",
        help="Directory to change to before running",
    ),
    env: list[str] | None = typer.Option(
        None,
        "--env",
        "-e",
        help="NAME=VALUE to set, NAME alone to unset (repeatable, order kept)",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON",
    ),
    explain: bool = typer.Option(
        False,
        "--explain",
        help="Show the detected dialect on stderr",
    ),
):
    """Print the command line to send to a running shell."""
    executable = shell or get_settings().shell
    options = CommandOptions(
        cwd=cwd,
        args=tuple(args or ()),
        env=parse_env_option(env) if env else None,
    )
    try:
        prepared = build_command_line(ShellProcessInfo(executable=executable), options)
    except QuotingError as e:
        print_cli_error(e.message, hint=e.hint)
        raise typer.Exit(1)

    if prepared.warning and not output_json:
        print_cli_warning(prepared.warning)

    if output_json:
        typer.echo(
            json.dumps(
                {
                    "command": prepared.command,
                    "dialect": prepared.dialect.value if prepared.dialect else None,
                    "warning": prepared.warning,
                },
                indent=2,
            )
        )
        return

    if explain:
        print_prepared(prepared)
    typer.echo(prepared.command)


def quote_cmd(
    value: str = typer.Argument(..., help="Raw value to quote"),
    dialect: Dialect = typer.Option(
        Dialect.BASH,
        "--dialect",
        "-d",
        help="Shell dialect",
    ),
    mode: ShellQuoting = typer.Option(
        ShellQuoting.STRONG,
        "--mode",
        "-m",
        help="Quoting mode",
    ),
):
    """Quote a single value for a shell dialect."""
    try:
        typer.echo(render_quoted(value, mode, get_quoting_functions(dialect)))
    except QuotingError as e:
        print_cli_error(e.message, hint=e.hint)
        raise typer.Exit(1)


def detect_cmd(
    executable: str = typer.Argument(..., help="Shell executable path"),
):
    """Print the dialect of a shell executable."""
    dialect = detect_dialect(executable)
    if dialect is None:
        print_cli_error(
            f"Unknown shell: {executable}",
            hint="Supported: bash, pwsh/powershell, cmd",
        )
        raise typer.Exit(1)
    typer.echo(dialect.value)


def register(parent: typer.Typer):
    """Register shell commands with the parent CLI app."""
    parent.command("prepare", rich_help_panel="Shell")(prepare_cmd)
    parent.command("quote", rich_help_panel="Shell")(quote_cmd)
    parent.command("detect", rich_help_panel="Shell")(detect_cmd)
