"""Assemble command lines for long-lived interactive shells.

A shell that is already running cannot be given a fresh environment or
working directory, so both have to be encoded into the line written to its
standard input. ``prepare_command_line`` detects the dialect from the shell
executable and emits ``cd``, environment changes and the quoted program
invocation in that dialect's syntax.

Example:
    >>> from termline.shell import CommandOptions, ShellProcessInfo, prepare_command_line
    >>> print(prepare_command_line(
    ...     ShellProcessInfo("/bin/bash"),
    ...     CommandOptions(cwd="/tmp/work dir", args=["echo", "it's"], env={"A": "1"}),
    ... ))
    cd '/tmp/work dir' && env 'A=1' 'echo' 'it'"'"'s'
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from types import MappingProxyType

from termline.logging import get_logger
from termline.shell.quoting import (
    BASH_QUOTING,
    CMD_QUOTING,
    POWERSHELL_QUOTING,
    ShellQuotedString,
    ShellQuoting,
    ShellQuotingFunctions,
    join_quoted_arguments,
    reject_cmd_line_break,
)
from termline.shell.types import CommandOptions, Dialect, PreparedCommandLine, ShellProcessInfo

logger = get_logger(__name__)

__all__ = [
    "QUOTING_FUNCTIONS",
    "detect_dialect",
    "get_quoting_functions",
    "build_command_line",
    "prepare_command_line",
]

QUOTING_FUNCTIONS = MappingProxyType(
    {
        Dialect.BASH: BASH_QUOTING,
        Dialect.POWERSHELL: POWERSHELL_QUOTING,
        Dialect.CMD: CMD_QUOTING,
    }
)

# Checked in order; the first match wins.
_DIALECT_PATTERNS: tuple[tuple[Dialect, re.Pattern[str]], ...] = (
    (Dialect.BASH, re.compile(r"bash(\.exe)?\Z")),
    (Dialect.POWERSHELL, re.compile(r"(ps|pwsh|powershell)(\.exe)?\Z", re.IGNORECASE)),
    (Dialect.CMD, re.compile(r"cmd(\.exe)?\Z", re.IGNORECASE)),
)


def detect_dialect(executable: str | None) -> Dialect | None:
    """Return the dialect of a shell executable path, or None if unknown."""
    if not executable:
        return None
    for dialect, pattern in _DIALECT_PATTERNS:
        if pattern.search(executable):
            return dialect
    return None


def get_quoting_functions(dialect: Dialect) -> ShellQuotingFunctions:
    return QUOTING_FUNCTIONS[Dialect(dialect)]


def _executable_of(shell: ShellProcessInfo | str | None) -> str | None:
    if isinstance(shell, ShellProcessInfo):
        return shell.executable
    return shell


def _strong_args(args: Sequence[str]) -> list[ShellQuotedString]:
    return [ShellQuotedString(value, ShellQuoting.STRONG) for value in args]


# =============================================================================
# Per-dialect assembly
# =============================================================================


def _bash_command(options: CommandOptions) -> str:
    quote = BASH_QUOTING.strong
    command = ""
    if options.cwd:
        command += f"cd {quote(options.cwd)} && "
    if options.env is not None:
        command += "env"
        for name, value in options.env:
            if value is None:
                command += f" -u {quote(name)}"
            else:
                command += f" {quote(f'{name}={value}')}"
        command += " "
    return command + join_quoted_arguments(_strong_args(options.args), BASH_QUOTING)


def _powershell_command(options: CommandOptions) -> str:
    quoting = POWERSHELL_QUOTING
    command = ""
    if options.cwd:
        command += f"cd {quoting.strong(options.cwd)}; "
    if options.env is not None:
        for name, value in options.env:
            if value is None:
                command += f"Remove-Item ${{env:{quoting.escape(name)}}}; "
            else:
                command += f"${{env:{quoting.escape(name)}}}={quoting.strong(value)}; "
    return command + "& " + join_quoted_arguments(_strong_args(options.args), quoting)


def _cmd_command(options: CommandOptions) -> str:
    # cmd.exe cannot quote literally; strong requests degrade to escaping.
    args = [ShellQuotedString(value, ShellQuoting.ESCAPE) for value in options.args]
    command = ""
    if options.cwd:
        command += f"cd {CMD_QUOTING.escape(options.cwd)}"
    if options.env is None:
        return command + join_quoted_arguments(args, CMD_QUOTING)

    command += 'cmd /C "'
    for name, value in options.env:
        reject_cmd_line_break(name)
        if value is None:
            command += f'set {name}="" && '
        else:
            escaped = CMD_QUOTING.escape(value) if value else ""
            command += f'set "{name}={escaped}" && '
    return command + join_quoted_arguments(args, CMD_QUOTING) + '"'


_ASSEMBLERS = MappingProxyType(
    {
        Dialect.BASH: _bash_command,
        Dialect.POWERSHELL: _powershell_command,
        Dialect.CMD: _cmd_command,
    }
)


# =============================================================================
# Public API
# =============================================================================


def build_command_line(
    shell: ShellProcessInfo | str | None,
    options: CommandOptions,
) -> PreparedCommandLine:
    """Assemble the line to send to ``shell`` without logging anything.

    When the dialect cannot be detected the arguments are joined unquoted and
    ``warning`` explains why. That fallback is not injection-safe.

    Args:
        shell: The receiving shell, its executable path, or None.
        options: Working directory, arguments and environment changes.

    Returns:
        PreparedCommandLine with the command and the detected dialect.
    """
    executable = _executable_of(shell)
    dialect = detect_dialect(executable)
    if dialect is None:
        return PreparedCommandLine(
            command=" ".join(options.args),
            dialect=None,
            warning=f"Unknown shell, could not escape arguments: {executable or 'undefined'}",
        )
    return PreparedCommandLine(command=_ASSEMBLERS[dialect](options), dialect=dialect)


def prepare_command_line(
    shell: ShellProcessInfo | str | None,
    options: CommandOptions,
) -> str:
    """Assemble the line to send to ``shell``.

    An unrecognized shell is reported as a warning on the
    ``termline.shell.commandline`` logger and the unquoted fallback is
    returned; use ``build_command_line`` to inspect that case directly.

    Raises:
        QuotingError: A cmd.exe argument, directory or env value contains a
            line break.
    """
    prepared = build_command_line(shell, options)
    if prepared.warning:
        logger.warning(prepared.warning, executable=_executable_of(shell) or "undefined")
    return prepared.command
