"""Persistent shell session that receives assembled command lines.

ShellSession keeps one shell process alive and writes commands to its
standard input, so state such as the working directory survives between
commands. ``run()`` is the consumer of ``build_command_line``: it encodes
``cwd``/``env``/``args`` for the session's dialect before sending them.

Key features:
- Persistent bash, PowerShell or cmd.exe process
- Command delimiter protocol for reliable output parsing
- Exit code extraction
- Startup/shutdown command support
- Output truncation
- Async context manager support
"""

from __future__ import annotations

import asyncio
import re
import time
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from termline.errors import ShellSessionError, log_exception
from termline.logging import get_logger
from termline.shell.commandline import build_command_line, detect_dialect
from termline.shell.quoting import CMD_QUOTING
from termline.shell.types import (
    CommandOptions,
    Dialect,
    EnvChanges,
    ShellConfig,
    ShellProcessInfo,
    ShellResult,
)

logger = get_logger(__name__)

__all__ = ["ShellSession", "SessionConfig"]

# Arguments that make each shell read commands from a pipe without a prompt.
_SHELL_ARGUMENTS: dict[Dialect, tuple[str, ...]] = {
    Dialect.BASH: ("--norc", "--noprofile"),
    Dialect.POWERSHELL: ("-NoProfile", "-NonInteractive", "-Command", "-"),
    Dialect.CMD: ("/Q",),
}


# =============================================================================
# Session Configuration
# =============================================================================


@dataclass
class SessionConfig:
    """Configuration for a shell session.

    Attributes:
        workspace_root: Initial working directory of the shell process.
        startup_commands: Commands to run after session starts.
        shutdown_commands: Commands to run before session closes.
        shell_config: Shell executable, timeouts and environment.

    Example:
        >>> config = SessionConfig(
        ...     workspace_root=Path("/tmp/project"),
        ...     startup_commands=["source .venv/bin/activate"],
        ... )
    """

    workspace_root: Path | None = None
    startup_commands: list[str] = field(default_factory=list)
    shutdown_commands: list[str] = field(default_factory=list)
    shell_config: ShellConfig = field(default_factory=ShellConfig)


# =============================================================================
# Shell Session
# =============================================================================


class ShellSession:
    """Persistent shell session that maintains state between commands.

    Uses a delimiter protocol to parse command output and exit codes:
    1. Send command followed by a unique marker carrying the exit code
    2. Read stdout until the marker appears
    3. Extract the exit code from the marker

    Example:
        >>> async with ShellSession() as session:
        ...     result = await session.run(["ls", "-la"], cwd="/tmp/work dir")
        ...     print(result.stdout)
    """

    _DELIMITER_PREFIX = "___TERMLINE_SHELL_DELIMITER___"

    def __init__(self, config: SessionConfig | None = None) -> None:
        self._config = config or SessionConfig()
        self._dialect = detect_dialect(self._config.shell_config.shell)
        self._process: asyncio.subprocess.Process | None = None
        self._started = False
        self._closed = False
        self._lock = asyncio.Lock()
        self._command_history: list[ShellResult] = []

    @property
    def is_running(self) -> bool:
        """Check if the session is running."""
        return self._started and not self._closed and self._process is not None

    @property
    def dialect(self) -> Dialect | None:
        """Dialect of the configured shell, None if it is not recognized."""
        return self._dialect

    @property
    def process_info(self) -> ShellProcessInfo:
        shell = self._config.shell_config.shell
        arguments = _SHELL_ARGUMENTS.get(self._dialect, ()) if self._dialect else ()
        return ShellProcessInfo(executable=shell, arguments=arguments)

    @property
    def command_history(self) -> list[ShellResult]:
        """Results of the commands executed in this session."""
        return list(self._command_history)

    def clear_history(self) -> None:
        self._command_history.clear()

    async def start(self) -> None:
        """Start the shell session.

        Spawns the shell process and runs any startup commands.

        Raises:
            ShellSessionError: Session already started or closed, or the
                configured shell is not a supported dialect.
        """
        if self._closed:
            raise ShellSessionError("Session has been closed")
        if self._started:
            raise ShellSessionError("Session already started")
        if self._dialect is None:
            raise ShellSessionError(
                f"Unsupported shell: {self._config.shell_config.shell}",
                hint="Use bash, PowerShell (pwsh) or cmd.exe, or set TERMLINE_SHELL",
            )

        async with self._lock:
            await self._spawn_process()
            self._started = True
            logger.debug(
                "Shell session started",
                shell=self._config.shell_config.shell,
                dialect=self._dialect.value,
            )

            for cmd in self._config.startup_commands:
                await self._execute_internal(cmd)

    async def execute(self, command: str) -> ShellResult:
        """Send a raw command line to the shell.

        Raises:
            ShellSessionError: If session is not started or is closed.
        """
        if not self._started:
            raise ShellSessionError(
                "Session not started. Call start() first or use as context manager."
            )
        if self._closed:
            raise ShellSessionError("Session has been closed")

        async with self._lock:
            result = await self._execute_internal(command)
            self._command_history.append(result)
            return result

    async def run(
        self,
        args: Sequence[str],
        *,
        cwd: str | Path | None = None,
        env: EnvChanges | None = None,
    ) -> ShellResult:
        """Run a program with quoted arguments, optionally in ``cwd`` with ``env`` changes.

        A ``cwd`` change persists in the session afterwards, as it would for
        a user typing the same line. cmd.exe has no connector after its
        ``cd`` segment, so on cmd.exe the directory change is sent as its own
        ``cd /d`` command first; if that fails its result is returned and the
        program is not run.

        Raises:
            ShellSessionError: The shell is not a recognized dialect.
            QuotingError: cmd.exe was given a value containing a line break.
        """
        cwd = str(cwd) if cwd is not None else None
        change_dir: str | None = None
        if self._dialect is Dialect.CMD and cwd:
            change_dir = f"cd /d {CMD_QUOTING.escape(cwd)}"
            cwd = None

        options = CommandOptions(cwd=cwd, args=tuple(args), env=env)
        prepared = build_command_line(self.process_info, options)
        if not prepared.is_safe:
            raise ShellSessionError(prepared.warning or "Cannot quote arguments for this shell")

        if change_dir is not None:
            changed = await self.execute(change_dir)
            if not changed.success:
                return changed

        logger.debug("Running prepared command", command=prepared.command)
        return await self.execute(prepared.command)

    async def restart(self) -> None:
        """Kill the shell process, start a new one and rerun startup commands."""
        async with self._lock:
            if self._process is not None:
                await self._kill_process()

            self._closed = False
            await self._spawn_process()

            for cmd in self._config.startup_commands:
                await self._execute_internal(cmd)

    async def close(self) -> None:
        """Run shutdown commands and terminate the shell process."""
        if self._closed:
            return

        async with self._lock:
            self._closed = True

            if self._process is not None:
                for cmd in self._config.shutdown_commands:
                    try:
                        await self._execute_internal(cmd)
                    except Exception as e:
                        log_exception(logger.logger, f"Shutdown command failed: {cmd}", e)

                await self._kill_process()

    async def __aenter__(self) -> ShellSession:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Internal Methods
    # =========================================================================

    async def _spawn_process(self) -> None:
        info = self.process_info
        cwd = self._config.workspace_root or Path.cwd()

        self._process = await asyncio.create_subprocess_exec(
            info.executable,
            *info.arguments,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd),
            env=self._config.shell_config.process_env(),
        )

    async def _kill_process(self) -> None:
        if self._process is None:
            return

        try:
            self._process.kill()
            await asyncio.wait_for(self._process.wait(), timeout=5.0)
        except (TimeoutError, ProcessLookupError):
            pass
        finally:
            self._process = None

    def _wrap_command(self, command: str, delimiter: str) -> str:
        """Append the exit-code marker in the session's dialect."""
        if self._dialect is Dialect.POWERSHELL:
            return f"""
{command}
$__exit_code__ = $LASTEXITCODE
if ($__exit_code__ -eq $null) {{ $__exit_code__ = 0 }}
Write-Host ""
Write-Host "{delimiter}_EXIT_$__exit_code__"
"""
        if self._dialect is Dialect.CMD:
            return f"""
{command}
echo.
echo {delimiter}_EXIT_%ERRORLEVEL%
"""
        return f"""
{command}
__exit_code__=$?
echo ""
echo "{delimiter}_EXIT_${{__exit_code__}}"
"""

    async def _execute_internal(self, command: str) -> ShellResult:
        if self._process is None or self._process.stdin is None:
            raise ShellSessionError("Shell process not available")

        start_time = time.perf_counter()
        delimiter = f"{self._DELIMITER_PREFIX}{uuid.uuid4().hex}"
        timeout = self._config.shell_config.timeout
        max_output = self._config.shell_config.max_output_bytes

        try:
            self._process.stdin.write(self._wrap_command(command, delimiter).encode() + b"\n")
            await self._process.stdin.drain()

            stdout_data, stderr_data, exit_code = await asyncio.wait_for(
                self._read_until_delimiter(delimiter, max_output),
                timeout=timeout,
            )

            duration_ms = (time.perf_counter() - start_time) * 1000

            if len(stdout_data) >= max_output:
                stdout_data += "\n[OUTPUT TRUNCATED]"
            if len(stderr_data) >= max_output:
                stderr_data += "\n[OUTPUT TRUNCATED]"

            return ShellResult(
                success=exit_code == 0,
                exit_code=exit_code,
                stdout=stdout_data.strip(),
                stderr=stderr_data.strip(),
                command=command,
                duration_ms=duration_ms,
                timed_out=False,
            )

        except TimeoutError:
            logger.warning("Shell command timed out, restarting shell", timeout=timeout)
            await self._kill_process()
            await self._spawn_process()
            self._started = True

            return ShellResult.failed(
                command,
                f"Command timed out after {timeout} seconds",
                timeout * 1000,
                timed_out=True,
            )

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            log_exception(logger.logger, "Shell command failed", e, include_traceback=False)
            return ShellResult.failed(command, str(e), duration_ms)

    async def _read_until_delimiter(
        self,
        delimiter: str,
        max_output: int,
    ) -> tuple[str, str, int]:
        """Read output until the delimiter is found.

        Returns:
            Tuple of (stdout, stderr, exit_code)
        """
        if self._process is None or self._process.stdout is None:
            raise ShellSessionError("Shell process not available")

        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []
        stdout_size = 0
        stderr_size = 0
        exit_code = 0

        delimiter_pattern = re.compile(rf"{re.escape(delimiter)}_EXIT_(-?\d+)")

        # 0.1s per iteration, about 5 minutes in total
        max_iterations = 3000
        iterations = 0

        while iterations < max_iterations:
            iterations += 1
            try:
                chunk = await asyncio.wait_for(
                    self._process.stdout.readline(),
                    timeout=0.1,
                )
                if chunk:
                    line = chunk.decode(errors="replace")

                    match = delimiter_pattern.search(line)
                    if match:
                        exit_code = int(match.group(1))
                        before_delimiter = line[: match.start()]
                        if before_delimiter.strip() and stdout_size < max_output:
                            stdout_chunks.append(before_delimiter.encode())
                            stdout_size += len(before_delimiter)
                        break

                    if stdout_size < max_output:
                        stdout_chunks.append(chunk)
                        stdout_size += len(chunk)

            except TimeoutError:
                if self._process.returncode is not None:
                    break
                continue

            if self._process.stderr is not None:
                try:
                    stderr_chunk = await asyncio.wait_for(
                        self._process.stderr.read(4096),
                        timeout=0.01,
                    )
                    if stderr_chunk and stderr_size < max_output:
                        stderr_chunks.append(stderr_chunk)
                        stderr_size += len(stderr_chunk)
                except TimeoutError:
                    pass

        stdout = b"".join(stdout_chunks).decode(errors="replace")
        stderr = b"".join(stderr_chunks).decode(errors="replace")

        return stdout, stderr, exit_code
