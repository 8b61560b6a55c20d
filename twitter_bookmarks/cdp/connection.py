"""CDP WebSocket client.

Provides CDPClient for command/response exchange with a Chrome DevTools
Protocol endpoint over a single persistent WebSocket. Handles connection
lifecycle, id correlation, per-command timeouts and transport failures.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Tuple

import websockets
from websockets.exceptions import ConnectionClosed

from ..exceptions import (
    CommandFailedError,
    ConnectionClosedError,
    ConnectionFailedError,
    CDPTimeoutError,
    EvaluationFailedError,
    InvalidResponseError,
    NotConnectedError,
    TransportError,
)
from .protocol import EvaluateResult, coerce_int

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 18792
DEFAULT_PATH = "/cdp"


class PendingCommands:
    """Id allocator and table of in-flight commands.

    The only mutable state shared between callers and the receive loop.
    No method awaits, so every operation is atomic on the event loop. An
    entry is popped before its future is touched, which makes a second
    resolution of the same id impossible.
    """

    def __init__(self):
        self._last_id: int = 0
        self._entries: Dict[int, Tuple[str, asyncio.Future]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, cmd_id: int) -> bool:
        return cmd_id in self._entries

    def register(self, method: str) -> Tuple[int, asyncio.Future]:
        """Allocate the next command id and its response future."""
        self._last_id += 1
        future = asyncio.get_running_loop().create_future()
        self._entries[self._last_id] = (method, future)
        return self._last_id, future

    def method_for(self, cmd_id: int) -> Optional[str]:
        entry = self._entries.get(cmd_id)
        return entry[0] if entry else None

    def resolve(self, cmd_id: int, response: dict) -> bool:
        """Resolve a pending command. Returns False if the id is unknown."""
        entry = self._entries.pop(cmd_id, None)
        if entry is None:
            return False
        _, future = entry
        if future.done():
            return False
        future.set_result(response)
        return True

    def fail(self, cmd_id: int, error: BaseException) -> bool:
        """Fail a pending command. Returns False if the id is unknown."""
        entry = self._entries.pop(cmd_id, None)
        if entry is None:
            return False
        _, future = entry
        if future.done():
            return False
        future.set_exception(error)
        return True

    def discard(self, cmd_id: int) -> None:
        self._entries.pop(cmd_id, None)

    def fail_all(self, error: BaseException) -> int:
        """Fail every pending command with the same error."""
        entries = list(self._entries.values())
        self._entries.clear()
        failed = 0
        for _, future in entries:
            if not future.done():
                future.set_exception(error)
                failed += 1
        return failed


class CDPClient:
    """Command/response client for a Chrome DevTools Protocol endpoint.

    Handles:
    - Connection lifecycle with a ping/pong liveness probe
    - Id allocation and response correlation by id
    - Per-command timeout racing
    - Failing in-flight commands on disconnect or transport errors

    Usage:
        async with CDPClient(port=18792) as client:
            response = await client.send_command("Page.enable")
            title = await client.evaluate("document.title")

    Attributes:
        ws_url: WebSocket endpoint URL
        command_timeout: Default command timeout in seconds
        probe_timeout: Liveness probe timeout in seconds
        max_size: Maximum WebSocket message size in bytes (extraction payloads can be large)
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        path: str = DEFAULT_PATH,
        *,
        command_timeout: float = 15.0,
        probe_timeout: float = 5.0,
        max_size: int = 16_777_216,
    ):
        """Initialize CDP client.

        Args:
            host: Chrome (or relay) host
            port: Remote debugging port (1-65535)
            path: WebSocket path on the endpoint
            command_timeout: Default command timeout in seconds
            probe_timeout: Liveness probe timeout in seconds
            max_size: Maximum WebSocket message size in bytes

        Raises:
            ValueError: If port is out of range
        """
        if not 1 <= port <= 65535:
            raise ValueError(f"port must be 1-65535, got {port}")
        if not path.startswith("/"):
            path = "/" + path

        self.host = host
        self.port = port
        self.path = path
        self.ws_url = f"ws://{host}:{port}{path}"
        self.command_timeout = command_timeout
        self.probe_timeout = probe_timeout
        self.max_size = max_size

        self._ws = None
        self._pending = PendingCommands()
        self._receive_task: Optional[asyncio.Task] = None
        self._is_connected: bool = False

    @property
    def is_connected(self) -> bool:
        """Check if WebSocket connection is active."""
        if not self._is_connected or self._ws is None:
            return False
        return self._ws.state.name == "OPEN"

    async def connect(self) -> None:
        """Open the WebSocket, start the receive loop and probe liveness.

        Does nothing if already connected.

        Raises:
            ConnectionFailedError: If the socket cannot be opened or the probe fails
        """
        if self.is_connected:
            return
        if self._ws is not None:
            # Left over from a connection the remote dropped.
            await self.disconnect()

        logger.info(f"Connecting to {self.ws_url}")
        try:
            self._ws = await websockets.connect(self.ws_url, max_size=self.max_size)
        except Exception as e:
            self._ws = None
            raise self._connection_failed(e) from e

        self._is_connected = True
        self._receive_task = asyncio.create_task(self._receive_loop())

        try:
            await self._probe()
        except Exception as e:
            logger.warning(f"Liveness probe failed for {self.ws_url}: {e!r}")
            await self.disconnect()
            raise self._connection_failed(e) from e

        logger.info("CDP connection established")

    async def disconnect(self) -> None:
        """Close the connection and fail in-flight commands. Idempotent."""
        if self._ws is None and self._receive_task is None:
            return

        logger.info("Disconnecting CDP client")
        self._is_connected = False

        if self._receive_task and not self._receive_task.done():
            self._receive_task.cancel()
            try:
                await self._receive_task
            except asyncio.CancelledError:
                pass
        self._receive_task = None

        if self._ws is not None:
            try:
                await self._ws.close()
            except Exception as e:
                logger.warning(f"Error closing WebSocket: {e}")
            self._ws = None

        failed = self._pending.fail_all(ConnectionClosedError())
        if failed:
            logger.debug(f"Failed {failed} pending command(s) on disconnect")

        logger.info("CDP connection closed")

    async def __aenter__(self) -> "CDPClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    async def send_command(
        self,
        method: str,
        params: Optional[dict] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Send a CDP command and wait for its response.

        Args:
            method: CDP method name (e.g., "Runtime.evaluate", "Page.enable")
            params: Method parameters (default: empty dict)
            timeout: Command timeout in seconds (default: self.command_timeout)

        Returns:
            Full response frame, including "id" and "result"

        Raises:
            NotConnectedError: If there is no active connection
            TransportError: If the frame could not be sent or the connection dropped
            CDPTimeoutError: If no response arrives within the timeout
            CommandFailedError: If Chrome answers with an error frame
            ConnectionClosedError: If disconnect() runs while waiting
        """
        if not self.is_connected:
            raise NotConnectedError()

        cmd_timeout = timeout if timeout is not None else self.command_timeout

        cmd_id, future = self._pending.register(method)
        try:
            message = json.dumps({"id": cmd_id, "method": method, "params": params or {}})
        except (TypeError, ValueError) as e:
            self._pending.discard(cmd_id)
            raise InvalidResponseError(
                f"Failed to encode request for method {method}", method=method
            ) from e

        try:
            await self._ws.send(message)
        except Exception as e:
            self._pending.discard(cmd_id)
            raise TransportError(f"failed to send '{method}'", cause=e) from e

        logger.debug(f"Sent command {cmd_id}: {method}")

        try:
            return await asyncio.wait_for(future, timeout=cmd_timeout)
        except asyncio.TimeoutError:
            raise CDPTimeoutError(
                "Command timed out", command_method=method, timeout=cmd_timeout
            ) from None
        finally:
            # A late response for this id must find nothing to resolve.
            self._pending.discard(cmd_id)

    async def evaluate(
        self,
        expression: str,
        *,
        await_promise: bool = True,
        return_by_value: bool = True,
        timeout: Optional[float] = None,
    ) -> Any:
        """Evaluate a JavaScript expression in the page.

        Returns:
            The expression's value, or None when it produced no value

        Raises:
            EvaluationFailedError: If the expression threw
            InvalidResponseError: If the envelope is malformed
        """
        response = await self.send_command(
            "Runtime.evaluate",
            {
                "expression": expression,
                "awaitPromise": await_promise,
                "returnByValue": return_by_value,
            },
            timeout=timeout,
        )

        result = EvaluateResult.from_response(response)
        if result.failed:
            raise EvaluationFailedError(result.exception_text, method="Runtime.evaluate")
        logger.debug(f"Runtime.evaluate returned {result.type}")
        return result.value

    async def _probe(self) -> None:
        async def ping() -> None:
            pong_waiter = await self._ws.ping()
            await pong_waiter

        await asyncio.wait_for(ping(), timeout=self.probe_timeout)

    def _connection_failed(self, error: BaseException) -> ConnectionFailedError:
        return ConnectionFailedError(
            f"Unable to connect to Chrome CDP endpoint at {self.ws_url}: {error}",
            url=self.ws_url,
            details={
                "recovery": f"Ensure Chrome is reachable at {self.ws_url} "
                "and remote debugging is active"
            },
        )

    async def _receive_loop(self) -> None:
        """Background task routing response frames to pending commands.

        Any exit other than cancellation fails every pending command with
        TransportError and marks the client disconnected.
        """
        try:
            async for message in self._ws:
                self._dispatch(message)
        except ConnectionClosed as e:
            logger.warning(f"WebSocket connection closed: {e}")
            error = TransportError("connection closed by remote", cause=e)
        except Exception as e:
            logger.error(f"Receive loop error: {e}", exc_info=True)
            error = TransportError("receive loop failed", cause=e)
        else:
            logger.warning("WebSocket connection closed by remote")
            error = TransportError("connection closed by remote")

        self._is_connected = False
        failed = self._pending.fail_all(error)
        if failed:
            logger.debug(f"Failed {failed} pending command(s) after transport error")

    def _dispatch(self, message: Any) -> None:
        if isinstance(message, bytes):
            try:
                message = message.decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("Dropping non UTF-8 CDP frame")
                return

        try:
            data = json.loads(message)
        except json.JSONDecodeError as e:
            logger.debug(f"Dropping malformed CDP frame: {e}")
            return

        if not isinstance(data, dict):
            logger.debug("Dropping non-object CDP frame")
            return

        cmd_id = coerce_int(data.get("id"))
        if cmd_id is None:
            if "method" in data:
                logger.debug(f"Ignoring CDP event: {data['method']}")
            else:
                logger.debug("Dropping CDP frame without id")
            return

        error = data.get("error")
        if isinstance(error, dict):
            failure = CommandFailedError(
                str(error.get("message") or "Unknown CDP error"),
                method=self._pending.method_for(cmd_id),
                error_code=coerce_int(error.get("code")),
            )
            if not self._pending.fail(cmd_id, failure):
                logger.debug(f"Discarding error frame for unknown command {cmd_id}")
            return

        if not self._pending.resolve(cmd_id, data):
            logger.debug(f"Discarding response for unknown command {cmd_id}")
