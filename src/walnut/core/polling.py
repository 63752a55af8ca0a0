"""Cooperative polling used by every waiting capability."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from walnut.errors import TimeoutError

Condition = Callable[[], Awaitable[bool]]


async def poll_until(
    condition: Condition,
    timeout_ms: float,
    interval_ms: float = 100,
    description: str = "condition to be true",
) -> None:
    """Await ``condition`` repeatedly until it returns True.

    The condition is checked once immediately, then every ``interval_ms``.
    Each sleep is a suspension point, so cancelling the surrounding task
    stops the poll.

    Raises:
        TimeoutError: Once at least ``timeout_ms`` elapsed without success.
    """
    loop = asyncio.get_running_loop()
    start = loop.time()
    deadline = start + timeout_ms / 1000

    while True:
        if await condition():
            return
        now = loop.time()
        if now >= deadline:
            raise TimeoutError(description, timeout_ms=timeout_ms, elapsed_ms=(now - start) * 1000)
        await asyncio.sleep(min(interval_ms / 1000, deadline - now))
