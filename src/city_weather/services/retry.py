"""
Resilient Invoker

Retries any nullary async operation with bounded attempts and linear
backoff, optionally degrading to a fallback answer on the final attempt.

Attempt n that fails waits ``base_delay * n`` before attempt n + 1, so a
run that exhausts ``max_attempts`` has waited
``base_delay * (1 + 2 + ... + (max_attempts - 1))`` in total.

When a ``fallback`` callable is given it is consulted instead of the last
live attempt; a non-None value is returned straight away, otherwise the
live attempt runs as usual. With a single attempt there is no "instead",
so the fallback is consulted after that attempt fails.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from fastmcp.utilities.logging import get_logger
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    stop_after_attempt,
    wait_incrementing,
)

T = TypeVar("T")

logger = get_logger("retry")


async def invoke(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    fallback: Optional[Callable[[], Optional[T]]] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run ``operation`` until it succeeds or the attempt budget is spent.

    Args:
        operation: Nullary coroutine function to invoke
        max_attempts: Total attempts, including the first (>= 1)
        base_delay: Backoff unit in seconds; waits are 1x, 2x, 3x, ...
        fallback: Optional source of a known-good answer, returning None
                  when it has nothing for this call
        sleep: Awaitable sleep used between attempts (injectable for tests)

    Returns:
        T: The first successful result, or the fallback value

    Raises:
        ValueError: If max_attempts < 1
        Exception: The last error raised by ``operation`` once attempts are
                   exhausted and no fallback value is available
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_incrementing(start=base_delay, increment=base_delay),
        sleep=sleep,
        before_sleep=before_sleep_log(logger, logging.DEBUG),
        reraise=True,
    )

    try:
        async for attempt in retrying:
            with attempt:
                number = attempt.retry_state.attempt_number
                logger.debug(f"Retry attempt {number}/{max_attempts}")

                if fallback is not None and number == max_attempts > 1:
                    value = fallback()
                    if value is not None:
                        logger.info(
                            f"Using fallback data after {number - 1} failed attempts"
                        )
                        return value

                try:
                    return await operation()
                except Exception as e:
                    logger.warning(f"Attempt {number} failed: {e}")
                    raise
    except Exception:
        if fallback is not None and max_attempts == 1:
            value = fallback()
            if value is not None:
                logger.info("Using fallback data after 1 failed attempt")
                return value
        raise

    # AsyncRetrying with reraise=True never falls through
    raise RuntimeError("Unknown error during retry")
