"""Unit tests for the fixed-delay retry policy."""

import pytest
from unittest.mock import AsyncMock, patch

from twitter_bookmarks.exceptions import CDPTimeoutError, CommandFailedError
from twitter_bookmarks.retry import with_retry


def flaky(failures, result="ok"):
    """Operation that raises each error in failures, then returns result."""
    errors = list(failures)
    calls = []

    async def operation():
        calls.append(len(calls) + 1)
        if errors:
            raise errors.pop(0)
        return result

    operation.calls = calls
    return operation


@pytest.mark.unit
@pytest.mark.asyncio
class TestWithRetry:

    async def test_first_attempt_success(self):
        operation = flaky([])
        with patch("twitter_bookmarks.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            assert await with_retry("op", operation, retry_count=2) == "ok"

        assert operation.calls == [1]
        sleep.assert_not_awaited()

    async def test_succeeds_on_third_attempt(self):
        operation = flaky([CommandFailedError("one"), CommandFailedError("two")], result=7)
        with patch("twitter_bookmarks.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            assert await with_retry("op", operation, retry_count=2, delay=0.5) == 7

        assert operation.calls == [1, 2, 3]
        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)

    async def test_reraises_last_error_unmodified(self):
        third = CDPTimeoutError("Command timed out", command_method="Runtime.evaluate", timeout=30)
        operation = flaky([CommandFailedError("one"), CommandFailedError("two"), third])

        with patch("twitter_bookmarks.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(CDPTimeoutError) as exc_info:
                await with_retry("op", operation, retry_count=2)

        assert exc_info.value is third
        assert operation.calls == [1, 2, 3]
        assert sleep.await_count == 2

    async def test_zero_retries_runs_once(self):
        error = ValueError("boom")
        operation = flaky([error, error])

        with pytest.raises(ValueError):
            await with_retry("op", operation, retry_count=0)

        assert operation.calls == [1]

    async def test_real_delay_between_attempts(self):
        operation = flaky([RuntimeError("once")])
        assert await with_retry("op", operation, retry_count=1, delay=0.01) == "ok"
        assert operation.calls == [1, 2]
