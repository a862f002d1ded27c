import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
DelayFn = Callable[[int], float]


def linear_backoff(base_seconds: float) -> DelayFn:
    """Delay after the n-th failed attempt (1-based): base, 2*base, 3*base, ..."""

    def delay(attempt: int) -> float:
        return base_seconds * attempt

    return delay


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    attempts: int = 3,
    delay: DelayFn | None = None,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    label: str = "request",
) -> T | None:
    """Await ``fn()`` until it succeeds, at most ``attempts`` times.

    Returns the first successful result, or ``None`` once every attempt has
    failed. Failures of ``fn`` are logged and never re-raised.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    delay = delay or linear_backoff(1.0)

    for attempt in range(1, attempts + 1):
        try:
            return await fn()
        except Exception as exc:
            logger.info("%s attempt %d/%d failed: %s", label, attempt, attempts, exc)
            if attempt < attempts:
                await sleep(delay(attempt))

    logger.warning("%s: all %d attempts failed", label, attempts)
    return None
