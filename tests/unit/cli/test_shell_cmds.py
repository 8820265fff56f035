"""Tests for the prepare, quote and detect CLI commands."""

from __future__ import annotations

import json

import pytest
import typer
from typer.testing import CliRunner

from termline import __version__
from termline.cli import app
from termline.cli.cmds.shell_cmds import parse_env_option

runner = CliRunner()


# =============================================================================
# Option parsing
# =============================================================================


class TestParseEnvOption:
    """Tests for --env value parsing."""

    def test_set_unset_and_empty(self):
        """Test NAME=VALUE sets, NAME unsets and NAME= is empty."""
        assert parse_env_option(["A=1", "B", "C=", "D=x=y"]) == [
            ("A", "1"),
            ("B", None),
            ("C", ""),
            ("D", "x=y"),
        ]

    def test_missing_name(self):
        """Test an entry without a name is rejected."""
        with pytest.raises(typer.BadParameter):
            parse_env_option(["=value"])


# =============================================================================
# prepare
# =============================================================================


class TestPrepareCommand:
    """Tests for `termline prepare`."""

    def test_bash_line_on_stdout(self):
        """Test the bash line is the only stdout output."""
        result = runner.invoke(
            app,
            ["prepare", "--shell", "/bin/bash", "--cwd", "/tmp/work dir", "--", "node", "-e", "console.log(1)"],
        )

        assert result.exit_code == 0
        assert result.stdout == "cd '/tmp/work dir' && 'node' '-e' 'console.log(1)'\n"

    def test_env_entries_keep_order(self):
        """Test repeated --env options keep their order."""
        result = runner.invoke(
            app,
            ["prepare", "-s", "bash", "-e", "B=2", "-e", "A", "--", "make"],
        )

        assert result.exit_code == 0
        assert result.stdout.strip() == "env 'B=2' -u 'A' 'make'"

    def test_json_output(self):
        """Test --json reports command and dialect."""
        result = runner.invoke(
            app,
            ["prepare", "--shell", "pwsh", "--json", "--", "Get-ChildItem"],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data == {"command": "& 'Get-ChildItem'", "dialect": "powershell", "warning": None}

    def test_json_reports_unknown_shell(self):
        """Test --json carries the fallback warning."""
        result = runner.invoke(app, ["prepare", "--shell", "fish", "--json", "--", "ls", "-la"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["command"] == "ls -la"
        assert data["dialect"] is None
        assert data["warning"] == "Unknown shell, could not escape arguments: fish"

    def test_unknown_shell_warns_and_falls_back(self):
        """Test an unknown shell warns and prints the fallback."""
        result = runner.invoke(app, ["prepare", "--shell", "unknown-shell", "--", "a", "b c"])

        assert result.exit_code == 0
        assert "Unknown shell, could not escape arguments: unknown-shell" in result.output
        assert "a b c" in result.output

    def test_default_shell_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        """Test TERMLINE_SHELL picks the dialect."""
        monkeypatch.setenv("TERMLINE_SHELL", "C:\\Windows\\System32\\cmd.exe")

        result = runner.invoke(app, ["prepare", "--", "echo", "a&b"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "echo a^&b"

    def test_explain_summarizes_on_stderr(self):
        """Test --explain adds a dialect summary."""
        result = runner.invoke(app, ["prepare", "-s", "bash", "--explain", "--", "ls"])

        assert result.exit_code == 0
        assert "dialect" in result.output
        assert "bash" in result.output
        assert result.output.rstrip().endswith("'ls'")

    def test_cmd_line_break_is_an_error(self):
        """Test a line break for cmd.exe exits 1 and prints no command."""
        result = runner.invoke(app, ["prepare", "-s", "cmd.exe", "--", "echo", "x\ncalc.exe"])

        assert result.exit_code == 1
        assert "line break" in result.output
        assert "calc.exe" not in result.output

    def test_invalid_env_entry(self):
        """Test a nameless --env entry fails."""
        result = runner.invoke(app, ["prepare", "-s", "bash", "-e", "=oops", "--", "ls"])

        assert result.exit_code != 0


# =============================================================================
# quote / detect / version
# =============================================================================


class TestQuoteCommand:
    """Tests for `termline quote`."""

    def test_default_bash_strong(self):
        """Test quote defaults to bash strong quoting."""
        result = runner.invoke(app, ["quote", "it's"])

        assert result.exit_code == 0
        assert result.stdout == "'it'\"'\"'s'\n"

    def test_cmd_weak(self):
        """Test cmd.exe weak quoting."""
        result = runner.invoke(app, ["quote", 'ABC"DEF', "--dialect", "cmd", "--mode", "weak"])

        assert result.exit_code == 0
        assert result.stdout == '"ABC^"DEF"\n'

    def test_cmd_strong_is_rejected(self):
        """Test cmd.exe strong quoting exits 1."""
        result = runner.invoke(app, ["quote", "abc", "--dialect", "cmd", "--mode", "strong"])

        assert result.exit_code == 1
        assert "not supported" in result.output


class TestDetectCommand:
    """Tests for `termline detect`."""

    @pytest.mark.parametrize(
        ("executable", "dialect"),
        [
            ("/usr/bin/pwsh", "powershell"),
            ("/bin/bash", "bash"),
            ("C:\\Windows\\System32\\CMD.EXE", "cmd"),
        ],
    )
    def test_known(self, executable, dialect):
        """Test known executables print their dialect."""
        result = runner.invoke(app, ["detect", executable])

        assert result.exit_code == 0
        assert result.stdout.strip() == dialect

    def test_unknown(self):
        """Test an unknown executable exits 1."""
        result = runner.invoke(app, ["detect", "/bin/zsh"])

        assert result.exit_code == 1
        assert "Unknown shell: /bin/zsh" in result.output


def test_version():
    """Test --version prints the version."""
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"termline {__version__}" in result.stdout
