"""Bounded retry of idempotent async operations."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = getLogger(__name__)


async def retry[T](
    max_retries: int,
    accept: Callable[[T], bool],
    operation: Callable[[], Awaitable[T]],
    *,
    delay_seconds: float = 0.0,
) -> T:
    """Run ``operation`` until ``accept`` approves its result or retries run out.

    The last result is returned even when it was not accepted. Exceptions raised by
    ``operation`` are not caught.
    """

    if max_retries < 0:
        raise ValueError("max_retries must be non-negative")

    attempt = 0
    while True:
        result = await operation()
        if accept(result) or attempt >= max_retries:
            return result
        attempt += 1
        log.debug("Result rejected, retrying (%s/%s)", attempt, max_retries)
        if delay_seconds > 0:
            await asyncio.sleep(delay_seconds)
