from __future__ import annotations

import typer

from termline import __version__
from termline.cli.cmds import _HELP, register_shell
from termline.cli.output import console
from termline.logging import configure_logging


def version_callback(value: bool | None):
    if value:
        typer.echo(f"termline {__version__}")
        raise typer.Exit()


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=_HELP,
    rich_markup_mode="markdown",
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log level for diagnostics (default: TERMLINE_LOG_LEVEL)",
    ),
):
    """termline: command lines for long-lived shells."""
    configure_logging(level=log_level)


register_shell(app)


def main():
    app()


__all__ = ["app", "console", "main"]


if __name__ == "__main__":
    main()
