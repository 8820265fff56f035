"""Tests for environment-driven settings."""

from __future__ import annotations

import sys

import pytest

from termline.settings import Settings, default_shell, get_settings


def test_defaults():
    """Test defaults without TERMLINE_* variables."""
    settings = Settings.from_env()

    assert settings.shell == default_shell()
    assert settings.log_level == "WARNING"
    assert settings.log_format == "human"
    assert settings.timeout == 120.0


def test_platform_default_shell():
    """Test the platform default shell."""
    expected = "powershell" if sys.platform.startswith("win") else "/bin/bash"
    assert default_shell() == expected


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch):
    """Test TERMLINE_* variables override defaults."""
    monkeypatch.setenv("TERMLINE_SHELL", "C:\\Windows\\System32\\cmd.exe")
    monkeypatch.setenv("TERMLINE_LOG_LEVEL", "debug")
    monkeypatch.setenv("TERMLINE_LOG_FORMAT", "JSON")
    monkeypatch.setenv("TERMLINE_TIMEOUT", "2.5")

    settings = Settings.from_env()

    assert settings.shell == "C:\\Windows\\System32\\cmd.exe"
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"
    assert settings.timeout == 2.5


def test_invalid_values_fall_back(monkeypatch: pytest.MonkeyPatch):
    """Test invalid format and timeout fall back."""
    monkeypatch.setenv("TERMLINE_LOG_FORMAT", "xml")
    monkeypatch.setenv("TERMLINE_TIMEOUT", "soon")

    settings = Settings.from_env()

    assert settings.log_format == "human"
    assert settings.timeout == 120.0


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch):
    """Test settings are cached until cleared."""
    first = get_settings()
    monkeypatch.setenv("TERMLINE_SHELL", "pwsh")

    assert get_settings() is first

    get_settings.cache_clear()
    assert get_settings().shell == "pwsh"
