"""Exception hierarchy for bookmark extraction.

All errors inherit from BookmarksError. CDP protocol failures live under
CDPError; pipeline failures under ScraperError.
"""

from typing import Optional


class BookmarksError(Exception):
    """Base exception for all twitter-bookmarks errors.

    Attributes:
        message: Human-readable error message
        details: Optional dictionary with additional error context
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class CDPError(BookmarksError):
    """Base exception for Chrome DevTools Protocol failures."""

    pass


class CDPConnectionError(CDPError):
    """WebSocket connection failures."""

    pass


class ConnectionFailedError(CDPConnectionError):
    """Initial connection failed.

    Raised when the socket cannot be opened or the liveness probe gets no pong.
    Common causes: wrong port, Chrome not running, remote debugging disabled.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details)
        self.url = url


class NotConnectedError(CDPConnectionError):
    """Command issued while no connection is active."""

    def __init__(self, message: str = "CDP client is not connected", details: Optional[dict] = None):
        super().__init__(message, details)


class ConnectionClosedError(CDPConnectionError):
    """Connection closed while a command was in flight."""

    def __init__(self, message: str = "CDP connection was closed", details: Optional[dict] = None):
        super().__init__(message, details)


class TransportError(CDPConnectionError):
    """Sending or receiving a frame failed at the socket level.

    Attributes:
        cause: Underlying exception raised by the transport
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details)
        self.cause = cause

    def __str__(self):
        if self.cause is not None:
            return f"CDP transport error: {self.message}: {self.cause}"
        return f"CDP transport error: {self.message}"


class CDPCommandError(CDPError):
    """Command execution failures."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        error_code: Optional[int] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details)
        self.method = method
        self.error_code = error_code


class CommandFailedError(CDPCommandError):
    """Chrome answered a command with an error frame.

    Example: Page.navigate not exposed by a relay endpoint.
    """

    def __str__(self):
        if self.error_code is not None:
            return f"CDP command failed (code {self.error_code}): {self.message}"
        return f"CDP command failed: {self.message}"


class InvalidResponseError(CDPCommandError):
    """Response frame did not have the expected shape."""

    def __str__(self):
        return f"Invalid CDP response: {self.message}"


class EvaluationFailedError(CDPCommandError):
    """Runtime.evaluate reported a JavaScript exception."""

    def __str__(self):
        return f"JavaScript evaluation failed: {self.message}"


class CDPTimeoutError(CDPError):
    """Command timed out.

    Raised when CDP command does not receive response within timeout period.
    """

    def __init__(
        self,
        message: str,
        command_method: Optional[str] = None,
        timeout: Optional[float] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details)
        self.command_method = command_method
        self.timeout = timeout

    def __str__(self):
        if self.command_method and self.timeout is not None:
            return f"Timed out waiting for CDP command '{self.command_method}' after {self.timeout:g}s"
        return self.message


class ScraperError(BookmarksError):
    """Bookmark pipeline failures."""

    pass


class PageLoadTimeoutError(ScraperError):
    """Bookmarks timeline never reported ready."""

    def __init__(
        self,
        message: str,
        timeout: Optional[float] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details)
        self.timeout = timeout


class InvalidBookmarkPayloadError(ScraperError):
    """Extraction script returned something other than a list."""

    def __init__(
        self,
        message: str = "Unable to parse bookmark payload from page data",
        details: Optional[dict] = None,
    ):
        super().__init__(message, details)


class OutputWriteError(BookmarksError):
    """Rendered output could not be written.

    Attributes:
        path: Destination path that failed
    """

    def __init__(self, path: str, details: Optional[dict] = None):
        super().__init__(f"Unable to write output file at path: {path}", details)
        self.path = path
