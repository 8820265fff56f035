"""
Root conftest.py for termline tests.

This file provides:
1. Common pytest markers for test categorization
2. Settings and logger isolation between tests
"""

from __future__ import annotations

import logging

import pytest

from termline.settings import get_settings

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        norm = str(item.fspath).replace("\\", "/")

        if "/tests/integration/" in norm:
            item.add_marker(pytest.mark.integration)
        if "/shell/" in norm:
            item.add_marker(pytest.mark.shell)


def pytest_configure(config):
    """Register custom markers."""
    for name, desc in [
        ("integration", "Tests that spawn real shell processes"),
        ("shell", "Quoting, command-line and session tests"),
    ]:
        config.addinivalue_line("markers", f"{name}: {desc}")


# =============================================================================
# ENVIRONMENT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Drop TERMLINE_* overrides and the cached settings around each test."""
    for name in ("TERMLINE_SHELL", "TERMLINE_LOG_LEVEL", "TERMLINE_LOG_FORMAT", "TERMLINE_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_termline_logger():
    """Undo configure_logging() calls made by a test."""
    logger = logging.getLogger("termline")
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
