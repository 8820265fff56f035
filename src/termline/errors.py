"""Error hierarchy for termline.

All errors raised by termline derive from TermlineError so callers can catch
the whole family in one place:

    TermlineError
    ├── QuotingError
    │   └── UnsupportedModeError
    └── ShellSessionError

An unrecognized shell is deliberately *not* an error. The assembler degrades
to an unquoted fallback and reports it through
``PreparedCommandLine.warning`` and the ``termline`` logger.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

__all__ = [
    "TermlineError",
    "QuotingError",
    "UnsupportedModeError",
    "ShellSessionError",
    "log_exception",
]


def log_exception(
    logger: logging.Logger,
    msg: str,
    exc: BaseException,
    *,
    level: Literal["debug", "info", "warning", "error", "critical"] = "warning",
    include_traceback: bool = True,
) -> None:
    """Log an exception with its type name at the given level.

    Args:
        logger: Logger to write to.
        msg: Context message.
        exc: The exception being reported.
        level: Log level name.
        include_traceback: Attach exc_info to the record.
    """
    log = getattr(logger, level)
    log(
        "%s: %s: %s",
        msg,
        type(exc).__name__,
        exc,
        exc_info=exc if include_traceback else None,
    )


class TermlineError(Exception):
    """Base error for termline.

    Attributes:
        message: Human-readable description.
        details: Structured context for logs and tooling.
        hint: Suggested fix, rendered after the message.
        docs_url: Link to further documentation.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
        docs_url: str | None = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        self.hint = hint
        self.docs_url = docs_url
        super().__init__(self._format())

    def _format(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.docs_url:
            parts.append(f"Docs: {self.docs_url}")
        return "\n".join(parts)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class QuotingError(TermlineError):
    """Error while rendering a value for a shell dialect."""


class UnsupportedModeError(QuotingError):
    """A quoting mode was requested against a table that does not define it.

    This is a programming error: cmd.exe has no strong quoting, so asking for
    it will fail the same way on every call.
    """

    def __init__(self, mode: str, dialect: str) -> None:
        self.mode = mode
        self.dialect = dialect
        super().__init__(
            f"Quoting mode '{mode}' is not supported by the {dialect} dialect",
            details={"mode": mode, "dialect": dialect},
            hint="Use 'escape' or 'weak' quoting for this dialect",
        )


class ShellSessionError(TermlineError):
    """A shell session was used outside its lifecycle or cannot run a command."""
