"""Bounded retry for transient collaborator failures."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from troutgen.spawner.errors import TransientIOError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry(
    func: Callable[[], Awaitable[T]],
    attempts: int = 3,
    delay: float = 1.0,
    exception_types: tuple[type[BaseException], ...] = (TransientIOError,),
    operation_name: str = "operation",
) -> T:
    """Await ``func()`` up to ``attempts`` times with a fixed pause between tries.

    Only ``exception_types`` are retried; the last one is re-raised.
    """
    attempts = max(1, attempts)
    for attempt in range(attempts):
        try:
            return await func()
        except exception_types as e:
            if attempt == attempts - 1:
                logger.error("Failed %s after %d attempts: %s", operation_name, attempts, e)
                raise
            logger.warning(
                "Attempt %d failed for %s, retrying in %.2fs: %s", attempt + 1, operation_name, delay, e
            )
            await asyncio.sleep(delay)
    raise RuntimeError(f"Retry logic failed for {operation_name}")
