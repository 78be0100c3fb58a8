"""Sequential fetch-then-delay polling with a cooperative deadline."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")


async def poll_until(
    fetch: Callable[[], Awaitable[T]],
    is_done: Callable[[T], bool],
    *,
    interval: float,
    timeout: Optional[float],
    on_timeout: Callable[[], Exception],
) -> T:
    """Call ``fetch`` until ``is_done`` accepts its result.

    Polls never overlap: the delay starts when a fetch completes. The
    deadline is checked between polls and the delay is clamped to the time
    left, so a timeout fires at most one fetch after ``timeout`` seconds.
    Errors raised by ``fetch`` propagate unchanged.

    Args:
        fetch: Async function returning one snapshot.
        is_done: Predicate for a terminal snapshot.
        interval: Seconds between the end of one fetch and the next (> 0).
        timeout: Total seconds to wait, or None to wait forever.
        on_timeout: Factory for the exception raised at the deadline.

    Returns:
        The first snapshot accepted by ``is_done``.
    """
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval!r}")
    if timeout is not None and timeout <= 0:
        raise ValueError(f"timeout must be positive, got {timeout!r}")

    loop = asyncio.get_running_loop()
    deadline = None if timeout is None else loop.time() + timeout

    while True:
        result = await fetch()
        if is_done(result):
            return result

        delay = interval
        if deadline is not None:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise on_timeout()
            delay = min(interval, remaining)
        await asyncio.sleep(delay)
