"""
Fixed-delay polling for results that appear asynchronously
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from x402_gasless.config import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def poll_until_found(
    fetch: Callable[[], Awaitable[Optional[T]]],
    policy: RetryPolicy,
    description: str = "result",
) -> Optional[T]:
    """
    Call *fetch* up to ``policy.attempts`` times, ``policy.interval`` seconds apart.

    Returns the first non-None value, or None once the budget is spent.
    An exception from a single attempt counts as a miss: it is logged and
    the next attempt proceeds. Waiting suspends only the calling task.
    """
    for attempt in range(1, policy.attempts + 1):
        try:
            result = await fetch()
        except Exception as e:
            logger.warning(
                "Polling for %s failed (attempt %d/%d): %s",
                description,
                attempt,
                policy.attempts,
                e,
            )
            result = None

        if result is not None:
            logger.debug("Found %s after %d attempt(s)", description, attempt)
            return result

        if attempt < policy.attempts:
            await asyncio.sleep(policy.interval)

    return None
