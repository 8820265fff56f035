"""Per-dialect quoting functions and the quoted-argument joiner.

Every supported shell gets a ``ShellQuotingFunctions`` table with up to three
renderings of a raw value:

- **escape**: prefix each special character with the dialect's escape
  character, no surrounding delimiters. An empty value becomes an empty
  quoted pair so it still forms a token.
- **strong**: literal quoting, nothing inside is interpolated. cmd.exe has
  no such primitive, so its table leaves ``strong`` unset.
- **weak**: interpolating quotes; only the delimiter and the escape
  character sequences that would end the quoted region are escaped.

Line breaks in escape mode: bash single-quotes them and PowerShell writes
`` `n`` / `` `r``. cmd.exe has no encoding for CR or LF, so its escape and
weak functions raise ``QuotingError`` for such values.

References:
    bash: https://www.gnu.org/software/bash/manual/html_node/Quoting.html
    powershell: about_Quoting_Rules, about_Special_Characters

Example:
    >>> from termline.shell.quoting import BASH_QUOTING, ShellQuoting, render_quoted
    >>> print(render_quoted("it's", ShellQuoting.STRONG, BASH_QUOTING))
    'it'"'"'s'
    >>> print(join_quoted_arguments([("ls", "escape"), ("a b", "weak")], BASH_QUOTING))
    ls "a b"
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from termline.errors import QuotingError, UnsupportedModeError

__all__ = [
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
    "reject_cmd_line_break",
]


# =============================================================================
# Types
# =============================================================================


class ShellQuoting(str, Enum):
    """How a single argument is rendered."""

    ESCAPE = "escape"
    STRONG = "strong"
    WEAK = "weak"


@dataclass(frozen=True, slots=True)
class ShellQuotedString:
    """A raw value paired with the quoting mode it must be rendered with."""

    value: str
    quoting: ShellQuoting


@dataclass(frozen=True, slots=True)
class ShellQuotingFunctions:
    """Quoting functions for one shell dialect.

    Attributes:
        name: Dialect name, used in error messages.
        escape: Character-by-character escaping.
        weak: Interpolating quotes.
        strong: Literal quotes, or None when the dialect has none.
    """

    name: str
    escape: Callable[[str], str]
    weak: Callable[[str], str]
    strong: Callable[[str], str] | None = None

    def supports(self, mode: ShellQuoting) -> bool:
        return getattr(self, ShellQuoting(mode).value) is not None

    def for_mode(self, mode: ShellQuoting) -> Callable[[str], str]:
        """Return the function for ``mode``.

        Raises:
            UnsupportedModeError: The dialect does not define ``mode``.
        """
        mode = ShellQuoting(mode)
        func = getattr(self, mode.value)
        if func is None:
            raise UnsupportedModeError(mode.value, self.name)
        return func


# =============================================================================
# bash
# =============================================================================

_BASH_SPECIAL = re.compile(r"""[ \t\\|&;()<>{}$`"'*?\[\]#~!]""")
# Backslashes that bash would read as escapes inside double quotes.
_BASH_WEAK_BACKSLASH = re.compile(r'\\(?=[\\"]|\Z)')


def _bash_escape(arg: str) -> str:
    if not arg:
        return "''"
    # ``\<newline>`` is a line continuation, so newlines are single-quoted.
    return _BASH_SPECIAL.sub(r"\\\g<0>", arg).replace("\n", "'\n'")


def _bash_strong(arg: str) -> str:
    return "'" + arg.replace("'", "'\"'\"'") + "'"


def _bash_weak(arg: str) -> str:
    arg = _BASH_WEAK_BACKSLASH.sub(r"\\\\", arg)
    return '"' + arg.replace('"', '\\"') + '"'


BASH_QUOTING = ShellQuotingFunctions(
    name="bash",
    escape=_bash_escape,
    strong=_bash_strong,
    weak=_bash_weak,
)


# =============================================================================
# cmd.exe
# =============================================================================

_CMD_SPECIAL = re.compile(r'[ \t^"()<>&|;%!]')
_CMD_WEAK_CARET = re.compile(r'\^(?=[\^"]|\Z)')
_CMD_LINE_BREAK = re.compile(r"[\r\n]")


def reject_cmd_line_break(arg: str) -> None:
    """Raise ``QuotingError`` if ``arg`` holds CR or LF.

    cmd.exe ends a command at either character and has no escape for them.
    """
    if _CMD_LINE_BREAK.search(arg):
        raise QuotingError(
            "cmd.exe cannot quote a value containing a line break",
            details={"dialect": "cmd", "value": arg},
            hint="Remove CR/LF from the value or run it through PowerShell or bash",
        )


def _cmd_escape(arg: str) -> str:
    if not arg:
        return '""'
    reject_cmd_line_break(arg)
    return _CMD_SPECIAL.sub(r"^\g<0>", arg)


def _cmd_weak(arg: str) -> str:
    reject_cmd_line_break(arg)
    arg = _CMD_WEAK_CARET.sub("^^", arg)
    return '"' + arg.replace('"', '^"') + '"'


CMD_QUOTING = ShellQuotingFunctions(
    name="cmd",
    escape=_cmd_escape,
    weak=_cmd_weak,
)


# =============================================================================
# PowerShell
# =============================================================================

# PowerShell accepts typographic quotes as delimiters too.
_PS_SINGLE_QUOTES = "'‘’‚‛"
_PS_DOUBLE_QUOTES = '"“”„'

_PS_SPECIAL = re.compile(f"[ \\t`|&;(){{}}<>$@#{_PS_SINGLE_QUOTES}{_PS_DOUBLE_QUOTES}]")
_PS_STRONG_QUOTE = re.compile(f"[{_PS_SINGLE_QUOTES}]")
_PS_WEAK_QUOTE = re.compile(f"[{_PS_DOUBLE_QUOTES}]")
_PS_WEAK_BACKTICK = re.compile(f"`(?=[`{_PS_DOUBLE_QUOTES}]|\\Z)")


def _powershell_escape(arg: str) -> str:
    if not arg:
        return "''"
    # Bare words expand `n and `r, so line breaks never reach the parser raw.
    arg = _PS_SPECIAL.sub(r"`\g<0>", arg)
    return arg.replace("\r", "`r").replace("\n", "`n")


def _powershell_strong(arg: str) -> str:
    return "'" + _PS_STRONG_QUOTE.sub(r"\g<0>\g<0>", arg) + "'"


def _powershell_weak(arg: str) -> str:
    arg = _PS_WEAK_BACKTICK.sub("``", arg)
    return '"' + _PS_WEAK_QUOTE.sub(r"`\g<0>", arg) + '"'


POWERSHELL_QUOTING = ShellQuotingFunctions(
    name="powershell",
    escape=_powershell_escape,
    strong=_powershell_strong,
    weak=_powershell_weak,
)


# =============================================================================
# Rendering
# =============================================================================


def render_quoted(value: str, mode: ShellQuoting, table: ShellQuotingFunctions) -> str:
    """Render ``value`` with ``mode`` using ``table``.

    Raises:
        UnsupportedModeError: ``table`` has no function for ``mode``.
        QuotingError: cmd.exe was asked to quote a line break.
    """
    return table.for_mode(mode)(value)


def escape_for_shell(
    arg: ShellQuotedString | tuple[str, ShellQuoting] | str,
    table: ShellQuotingFunctions,
) -> str:
    """Render one argument; a bare string is emitted unchanged."""
    if isinstance(arg, str):
        return arg
    if isinstance(arg, ShellQuotedString):
        return render_quoted(arg.value, arg.quoting, table)
    value, mode = arg
    return render_quoted(value, mode, table)


def join_quoted_arguments(
    values: Iterable[ShellQuotedString | tuple[str, ShellQuoting] | str],
    table: ShellQuotingFunctions,
) -> str:
    """Render each argument in order and join them with single spaces.

    Raises:
        UnsupportedModeError: An argument requests a mode ``table`` lacks.
    """
    return " ".join(escape_for_shell(value, table) for value in values)


create_shell_command_line = join_quoted_arguments
