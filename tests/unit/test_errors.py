"""Tests for the termline error hierarchy."""

from __future__ import annotations

import logging

import pytest

from termline.errors import (
    QuotingError,
    ShellSessionError,
    TermlineError,
    UnsupportedModeError,
    log_exception,
)

# =============================================================================
# log_exception Tests
# =============================================================================


class TestLogException:
    """Tests for log_exception helper."""

    def test_log_exception_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test log_exception logs message and type at warning."""
        logger = logging.getLogger("test")

        with caplog.at_level(logging.WARNING):
            log_exception(logger, "Operation failed", ValueError("test error"), level="warning")

        assert "Operation failed" in caplog.text
        assert "ValueError" in caplog.text

    def test_log_exception_without_traceback(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test include_traceback=False omits exc_info."""
        logger = logging.getLogger("test")

        with caplog.at_level(logging.ERROR):
            log_exception(
                logger, "Simple failure", RuntimeError("boom"), level="error", include_traceback=False
            )

        assert "Simple failure" in caplog.text
        assert caplog.records[-1].exc_info is None


# =============================================================================
# TermlineError Tests
# =============================================================================


class TestTermlineError:
    """Tests for base TermlineError."""

    def test_basic_creation(self) -> None:
        """Test creating a basic error."""
        error = TermlineError("Something went wrong")

        assert error.message == "Something went wrong"
        assert error.details == {}
        assert error.hint is None
        assert error.docs_url is None
        assert str(error) == "Something went wrong"

    def test_with_hint_and_docs(self) -> None:
        """Test hint and docs lines are appended."""
        error = TermlineError("Failed", hint="Try again", docs_url="https://docs.example.com")

        assert "Hint: Try again" in str(error)
        assert "Docs: https://docs.example.com" in str(error)

    def test_repr(self) -> None:
        """Test repr shows class and message."""
        assert repr(TermlineError("Test message")) == "TermlineError('Test message')"


class TestUnsupportedModeError:
    """Tests for UnsupportedModeError."""

    def test_attributes(self) -> None:
        """Test mode, dialect and details are set."""
        error = UnsupportedModeError("strong", "cmd")

        assert error.mode == "strong"
        assert error.dialect == "cmd"
        assert error.details == {"mode": "strong", "dialect": "cmd"}
        assert error.message == "Quoting mode 'strong' is not supported by the cmd dialect"

    def test_hierarchy(self) -> None:
        """Test the error class hierarchy."""
        assert issubclass(UnsupportedModeError, QuotingError)
        assert issubclass(QuotingError, TermlineError)
        assert issubclass(ShellSessionError, TermlineError)
        assert not issubclass(ShellSessionError, QuotingError)
