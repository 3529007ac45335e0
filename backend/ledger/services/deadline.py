"""Request Deadline — bounds an orchestrator run so a stuck round trip cannot hang a request.

Invariants:
    - On expiry the awaited coroutine is cancelled at its current await point;
      the session context rolls back, so no write completes after the deadline
    - timeout_seconds=None disables the deadline
"""

import asyncio
from typing import Awaitable, TypeVar

from ledger.core.errors import DeadlineExceededError

T = TypeVar("T")


async def run_with_deadline(
    awaitable: Awaitable[T], timeout_seconds: float | None, title: str,
) -> T:
    try:
        async with asyncio.timeout(timeout_seconds):
            return await awaitable
    except TimeoutError as e:
        raise DeadlineExceededError(timeout_seconds, title) from e
