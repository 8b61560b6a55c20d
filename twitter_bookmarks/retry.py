"""Fixed-delay retry for pipeline stages."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def with_retry(
    name: str,
    operation: Callable[[], Awaitable[T]],
    retry_count: int,
    delay: float = 0.5,
) -> T:
    """Await operation up to retry_count + 1 times.

    Sleeps a fixed delay between failed attempts (no backoff, no jitter).
    When every attempt fails the last error is re-raised unchanged.

    Args:
        name: Operation name for log messages
        operation: Zero-argument coroutine function
        retry_count: Number of re-attempts after the first failure
        delay: Seconds to wait between attempts
    """
    attempts = max(0, retry_count) + 1
    last_error: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except Exception as e:
            last_error = e
            if attempt == attempts:
                break
            logger.warning(f"{name} failed (attempt {attempt}/{attempts}): {e}; retrying in {delay}s")
            await asyncio.sleep(delay)

    logger.error(f"{name} failed after {attempts} attempt(s): {last_error}")
    raise last_error
