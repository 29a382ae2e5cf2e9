"""Bounded retry with linear backoff for transient endpoint failures."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_DELAY_SECONDS = 1.0


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    delay: float = DEFAULT_DELAY_SECONDS,
    *,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await ``fn()`` up to ``max_retries`` times.

    After failed attempt ``n`` the helper sleeps ``delay * n`` seconds. Errors
    not listed in ``retry_on`` propagate immediately; the last error is
    re-raised once attempts are exhausted.
    """
    attempts = max(1, int(max_retries))
    last_error: Optional[BaseException] = None
    for attempt in range(1, attempts + 1):
        try:
            return await fn()
        except retry_on as exc:
            last_error = exc
            if attempt == attempts:
                break
            wait = delay * attempt
            logger.debug("attempt %s/%s failed (%s); retrying in %.2fs", attempt, attempts, exc, wait)
            await sleep(wait)
    assert last_error is not None
    raise last_error
