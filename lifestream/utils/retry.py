"""Bounded retry helper for best-effort side effects."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryOutcome(Generic[T]):
    """Result of :func:`retry_async`; never raised, always returned."""

    succeeded: bool
    attempts: int
    value: T | None = None
    error: Exception | None = None


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int,
    delay_seconds: float,
    description: str = "operation",
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> RetryOutcome[T]:
    """Await ``operation`` until it succeeds or ``max_attempts`` is exhausted.

    A fixed ``delay_seconds`` separates two attempts. Failures are logged and
    reported through the returned :class:`RetryOutcome` so the caller decides
    whether to surface them.
    """

    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    last_error: Exception | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            value = await operation()
        except Exception as exc:
            last_error = exc
            if attempt < max_attempts:
                logger.warning(
                    "%s failed (attempt %s/%s), retrying: %s",
                    description,
                    attempt,
                    max_attempts,
                    exc,
                )
                await sleep(delay_seconds)
            continue
        return RetryOutcome(succeeded=True, attempts=attempt, value=value)

    logger.error(
        "%s failed after %s attempts: %s", description, max_attempts, last_error
    )
    return RetryOutcome(succeeded=False, attempts=max_attempts, error=last_error)


__all__ = ["RetryOutcome", "retry_async"]
