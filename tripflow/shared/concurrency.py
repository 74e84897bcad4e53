"""
Async helpers for bounded waits and joined fan-out.

Nodes may fan work out concurrently but must join all of it before
returning; gather_joined() is the join barrier they use.
"""

import asyncio
import logging
from typing import Any, Awaitable, Iterable, List, Optional, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_timeout(
    awaitable: Awaitable[T],
    seconds: Optional[float],
    fallback: T,
    label: str = "call",
) -> T:
    """
    Await with a wall-clock budget, resolving to fallback on timeout.

    Args:
        awaitable: Coroutine or future to await
        seconds: Timeout in seconds; None or <= 0 waits indefinitely
        fallback: Value returned when the budget is exhausted
        label: Name used in the warning log

    Returns:
        The awaited result, or fallback on timeout
    """
    if seconds is None or seconds <= 0:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError:
        logger.warning(f"{label} timed out after {seconds}s, using fallback")
        return fallback


async def gather_joined(awaitables: Iterable[Awaitable[Any]]) -> List[Any]:
    """
    Run awaitables concurrently and return every result in input order.

    Exceptions are returned in place of results, never raised, so one
    failing sub-call cannot drop the others' results.
    """
    tasks = list(awaitables)
    if not tasks:
        return []
    return list(await asyncio.gather(*tasks, return_exceptions=True))
