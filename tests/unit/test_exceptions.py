"""Unit tests for the exception hierarchy.

Tests exception types, inheritance, attributes, and string representations.
"""

import pytest
from twitter_bookmarks.exceptions import (
    BookmarksError,
    CDPError,
    CDPConnectionError,
    ConnectionFailedError,
    NotConnectedError,
    ConnectionClosedError,
    TransportError,
    CDPCommandError,
    CommandFailedError,
    InvalidResponseError,
    EvaluationFailedError,
    CDPTimeoutError,
    ScraperError,
    PageLoadTimeoutError,
    InvalidBookmarkPayloadError,
    OutputWriteError,
)


@pytest.mark.unit
class TestBookmarksError:
    """Test base BookmarksError exception."""

    def test_base_exception_message(self):
        error = BookmarksError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.details == {}

    def test_base_exception_with_details(self):
        error = BookmarksError("Test error", details={"key": "value", "count": 42})
        assert str(error) == "Test error (key=value, count=42)"
        assert error.details == {"key": "value", "count": 42}


@pytest.mark.unit
class TestConnectionErrors:
    """Test connection-related exceptions."""

    def test_inheritance(self):
        for error_type in (ConnectionFailedError, NotConnectedError, ConnectionClosedError, TransportError):
            assert issubclass(error_type, CDPConnectionError)
            assert issubclass(error_type, CDPError)
            assert issubclass(error_type, BookmarksError)

    def test_connection_failed_error(self):
        error = ConnectionFailedError(
            "Unable to connect to Chrome CDP endpoint",
            url="ws://127.0.0.1:18792/cdp",
            details={"recovery": "Enable remote debugging"},
        )
        assert error.url == "ws://127.0.0.1:18792/cdp"
        assert "recovery=Enable remote debugging" in str(error)

    def test_default_messages(self):
        assert str(NotConnectedError()) == "CDP client is not connected"
        assert str(ConnectionClosedError()) == "CDP connection was closed"

    def test_transport_error_includes_cause(self):
        cause = OSError("connection reset by peer")
        error = TransportError("receive loop failed", cause=cause)
        assert error.cause is cause
        assert str(error) == "CDP transport error: receive loop failed: connection reset by peer"
        assert str(TransportError("closed")) == "CDP transport error: closed"


@pytest.mark.unit
class TestCommandErrors:
    """Test command execution exceptions."""

    def test_command_error_with_method(self):
        error = CDPCommandError(
            "Invalid expression", method="Runtime.evaluate", error_code=-32000
        )
        assert isinstance(error, CDPError)
        assert error.method == "Runtime.evaluate"
        assert error.error_code == -32000

    def test_command_failed_error(self):
        error = CommandFailedError(
            "Cannot find context with specified id",
            method="Runtime.evaluate",
            error_code=-32000,
        )
        assert isinstance(error, CDPCommandError)
        assert str(error) == "CDP command failed (code -32000): Cannot find context with specified id"

    def test_command_failed_without_code(self):
        assert str(CommandFailedError("nope")) == "CDP command failed: nope"

    def test_invalid_response_error(self):
        error = InvalidResponseError("Missing Runtime.evaluate envelope", method="Runtime.evaluate")
        assert isinstance(error, CDPCommandError)
        assert str(error) == "Invalid CDP response: Missing Runtime.evaluate envelope"

    def test_evaluation_failed_error(self):
        error = EvaluationFailedError("Uncaught TypeError")
        assert str(error) == "JavaScript evaluation failed: Uncaught TypeError"


@pytest.mark.unit
class TestTimeoutError:
    """Test timeout exception."""

    def test_timeout_error_basic(self):
        error = CDPTimeoutError("Command timed out")
        assert isinstance(error, CDPError)
        assert str(error) == "Command timed out"

    def test_timeout_error_with_details(self):
        error = CDPTimeoutError(
            "Timeout occurred", command_method="Runtime.evaluate", timeout=30.0
        )
        assert str(error) == "Timed out waiting for CDP command 'Runtime.evaluate' after 30s"
        assert error.command_method == "Runtime.evaluate"
        assert error.timeout == 30.0


@pytest.mark.unit
class TestScraperErrors:
    """Test pipeline and output exceptions."""

    def test_page_load_timeout(self):
        error = PageLoadTimeoutError("Bookmarks timeline did not load within 2 seconds", timeout=2.0)
        assert isinstance(error, ScraperError)
        assert not isinstance(error, CDPError)
        assert error.timeout == 2.0

    def test_invalid_payload_default_message(self):
        error = InvalidBookmarkPayloadError(details={"type": "dict"})
        assert isinstance(error, ScraperError)
        assert str(error) == "Unable to parse bookmark payload from page data (type=dict)"

    def test_output_write_error(self):
        error = OutputWriteError("/readonly/out.md")
        assert isinstance(error, BookmarksError)
        assert error.path == "/readonly/out.md"
        assert str(error) == "Unable to write output file at path: /readonly/out.md"
