"""Environment-driven settings.

Values are read from the process environment. A ``.env`` file next to the
working directory is loaded once when ``termline`` is imported.

Variables:
    TERMLINE_SHELL: Shell executable for sessions and the CLI.
    TERMLINE_LOG_LEVEL: Level for ``configure_logging`` (default WARNING).
    TERMLINE_LOG_FORMAT: ``human`` or ``json`` (default human).
    TERMLINE_TIMEOUT: Per-command session timeout in seconds (default 120).
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from functools import lru_cache

__all__ = ["Settings", "default_shell", "get_settings"]


def default_shell() -> str:
    """Platform default shell executable."""
    return "powershell" if sys.platform.startswith("win") else "/bin/bash"


@dataclass(frozen=True, slots=True)
class Settings:
    shell: str
    log_level: str = "WARNING"
    log_format: str = "human"
    timeout: float = 120.0

    @classmethod
    def from_env(cls) -> Settings:
        log_format = os.environ.get("TERMLINE_LOG_FORMAT", "human").lower()
        if log_format not in ("human", "json"):
            log_format = "human"

        try:
            timeout = float(os.environ.get("TERMLINE_TIMEOUT", "120"))
        except ValueError:
            timeout = 120.0

        return cls(
            shell=os.environ.get("TERMLINE_SHELL") or default_shell(),
            log_level=os.environ.get("TERMLINE_LOG_LEVEL", "WARNING").upper(),
            log_format=log_format,
            timeout=timeout,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings from the environment, read once per process."""
    return Settings.from_env()
