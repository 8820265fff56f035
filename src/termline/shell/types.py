"""Shell types for termline.

This module provides the data types shared by the command-line assembler
and the shell session:

- Dialect: Supported shell command languages
- ShellProcessInfo: The live shell a command line is destined for
- CommandOptions: Working directory, arguments and environment changes
- PreparedCommandLine: Assembled line plus an optional diagnostic
- ShellResult: Result of running a command in a session
- ShellConfig: Configuration for a shell session
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from termline.settings import get_settings

__all__ = [
    "UNSET",
    "Dialect",
    "EnvChanges",
    "ShellProcessInfo",
    "CommandOptions",
    "PreparedCommandLine",
    "ShellResult",
    "ShellConfig",
]

# Environment value that removes a variable instead of setting it.
UNSET = None

EnvChanges = Mapping[str, str | None] | Iterable[tuple[str, str | None]]


# =============================================================================
# Dialect
# =============================================================================


class Dialect(str, Enum):
    """Shell command language a line is written in."""

    BASH = "bash"
    POWERSHELL = "powershell"
    CMD = "cmd"


# =============================================================================
# Command-line inputs
# =============================================================================


@dataclass(frozen=True, slots=True)
class ShellProcessInfo:
    """Identifies the live shell process that will receive a command line.

    Only ``executable`` matters for quoting; ``arguments`` describes how the
    process was started.
    """

    executable: str
    arguments: tuple[str, ...] = ()


@dataclass(frozen=True)
class CommandOptions:
    """What to run and where.

    Attributes:
        cwd: Directory to change to first. Empty or None skips the ``cd``.
        args: Program followed by its arguments.
        env: Ordered ``(name, value)`` pairs. A value of ``None`` (``UNSET``)
            removes the variable. None means no environment changes at all,
            which differs from an empty sequence for some dialects.

    ``env`` may be given as a mapping; its iteration order is kept.

    Example:
        >>> options = CommandOptions(
        ...     cwd="/tmp/work dir",
        ...     args=["node", "-e", "console.log(1)"],
        ...     env={"PATH": "/usr/bin", "DEBUG": UNSET},
        ... )
        >>> options.env
        (('PATH', '/usr/bin'), ('DEBUG', None))
    """

    cwd: str | None = None
    args: tuple[str, ...] = ()
    env: tuple[tuple[str, str | None], ...] | None = None

    def __post_init__(self) -> None:
        if self.cwd is not None and not isinstance(self.cwd, str):
            object.__setattr__(self, "cwd", os.fspath(self.cwd))
        object.__setattr__(self, "args", tuple(self.args))
        if self.env is not None:
            items = self.env.items() if isinstance(self.env, Mapping) else self.env
            object.__setattr__(self, "env", tuple((name, value) for name, value in items))


@dataclass(frozen=True, slots=True)
class PreparedCommandLine:
    """An assembled command line.

    Attributes:
        command: Text to write to the shell's standard input.
        dialect: Dialect the line was quoted for, or None for the unquoted
            fallback.
        warning: Diagnostic explaining why quoting was skipped.
    """

    command: str
    dialect: Dialect | None = None
    warning: str | None = None

    @property
    def is_safe(self) -> bool:
        """True when every argument was quoted for a known dialect."""
        return self.dialect is not None


# =============================================================================
# Session results and configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class ShellResult:
    """Outcome of one command line sent to a ShellSession.

    ``exit_code`` is -1 when the command never completed (timeout or I/O
    failure); ``stderr`` then carries the reason.
    """

    success: bool
    exit_code: int
    stdout: str
    stderr: str
    command: str
    duration_ms: float
    timed_out: bool = False

    @classmethod
    def failed(
        cls,
        command: str,
        reason: str,
        duration_ms: float,
        *,
        timed_out: bool = False,
    ) -> ShellResult:
        """A result for a command that produced no exit code."""
        return cls(
            success=False,
            exit_code=-1,
            stdout="",
            stderr=reason,
            command=command,
            duration_ms=duration_ms,
            timed_out=timed_out,
        )


@dataclass
class ShellConfig:
    """How the session's shell process is launched and bounded.

    Attributes:
        shell: Executable; ``TERMLINE_SHELL`` or the platform default.
        timeout: Seconds to wait for a single command line.
        max_output_bytes: Capture limit per stream for one command.
        env: Variables layered over ``os.environ`` when the process starts.
    """

    shell: str = field(default_factory=lambda: get_settings().shell)
    timeout: float = field(default_factory=lambda: get_settings().timeout)
    max_output_bytes: int = 1_000_000
    env: dict[str, str] | None = None

    def process_env(self) -> dict[str, str]:
        return {**os.environ, **(self.env or {})}
