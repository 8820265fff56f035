from .help import _HELP
from .shell_cmds import register as register_shell

__all__ = [
    "register_shell",
    "_HELP",
]
