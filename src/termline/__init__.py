import os

from dotenv import find_dotenv, load_dotenv

if not os.environ.get("TERMLINE_ENV_LOADED"):
    load_dotenv(find_dotenv(usecwd=True))
    os.environ["TERMLINE_ENV_LOADED"] = "1"

from termline.errors import (
    QuotingError,
    ShellSessionError,
    TermlineError,
    UnsupportedModeError,
)
from termline.logging import configure_logging, get_logger
from termline.shell import (
    BASH_QUOTING,
    CMD_QUOTING,
    POWERSHELL_QUOTING,
    UNSET,
    CommandOptions,
    Dialect,
    PreparedCommandLine,
    SessionConfig,
    ShellConfig,
    ShellProcessInfo,
    ShellQuotedString,
    ShellQuoting,
    ShellResult,
    ShellSession,
    build_command_line,
    detect_dialect,
    join_quoted_arguments,
    prepare_command_line,
    render_quoted,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Errors
    "TermlineError",
    "QuotingError",
    "UnsupportedModeError",
    "ShellSessionError",
    # Logging
    "configure_logging",
    "get_logger",
    # Shell
    "BASH_QUOTING",
    "CMD_QUOTING",
    "POWERSHELL_QUOTING",
    "UNSET",
    "CommandOptions",
    "Dialect",
    "PreparedCommandLine",
    "SessionConfig",
    "ShellConfig",
    "ShellProcessInfo",
    "ShellQuotedString",
    "ShellQuoting",
    "ShellResult",
    "ShellSession",
    "build_command_line",
    "detect_dialect",
    "join_quoted_arguments",
    "prepare_command_line",
    "render_quoted",
]
