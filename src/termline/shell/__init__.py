"""Shell command-line construction for termline.

This package builds command lines for long-lived interactive shells:

- **ShellQuoting**: Escape / strong / weak quoting modes
- **BASH_QUOTING, CMD_QUOTING, POWERSHELL_QUOTING**: Per-dialect quoting tables
- **join_quoted_arguments**: Render and space-join quoted arguments
- **prepare_command_line**: Encode cwd, environment and arguments for a shell
- **ShellSession**: Persistent shell session that runs prepared lines

Example:
    >>> from termline.shell import CommandOptions, prepare_command_line
    >>>
    >>> line = prepare_command_line(
    ...     "/usr/bin/pwsh",
    ...     CommandOptions(cwd="C:/work", args=["node", "-v"], env={"DEBUG": None}),
    ... )
    >>> print(line)
    cd 'C:/work'; Remove-Item ${env:DEBUG}; & 'node' '-v'
"""

from termline.shell.commandline import (
    QUOTING_FUNCTIONS,
    build_command_line,
    detect_dialect,
    get_quoting_functions,
    prepare_command_line,
)
from termline.shell.quoting import (
    BASH_QUOTING,
    CMD_QUOTING,
    POWERSHELL_QUOTING,
    ShellQuotedString,
    ShellQuoting,
    ShellQuotingFunctions,
    create_shell_command_line,
    escape_for_shell,
    join_quoted_arguments,
    render_quoted,
)
from termline.shell.session import SessionConfig, ShellSession
from termline.shell.types import (
    UNSET,
    CommandOptions,
    Dialect,
    PreparedCommandLine,
    ShellConfig,
    ShellProcessInfo,
    ShellResult,
)

__all__ = [
    # Quoting
    "ShellQuoting",
    "ShellQuotedString",
    "ShellQuotingFunctions",
    "BASH_QUOTING",
    "CMD_QUOTING",
    "POWERSHELL_QUOTING",
    "render_quoted",
    "escape_for_shell",
    "join_quoted_arguments",
    "create_shell_command_line",
    # Command lines
    "UNSET",
    "Dialect",
    "CommandOptions",
    "ShellProcessInfo",
    "PreparedCommandLine",
    "QUOTING_FUNCTIONS",
    "detect_dialect",
    "get_quoting_functions",
    "build_command_line",
    "prepare_command_line",
    # Session
    "ShellConfig",
    "ShellResult",
    "SessionConfig",
    "ShellSession",
]
