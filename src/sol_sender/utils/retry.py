"""Bounded retry with backoff for lookups that may come back empty."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from sol_sender.utils.aio import wait

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    """The lookup produced a value."""

    value: T
    attempts: int = 1


@dataclass(frozen=True)
class Exhausted:
    """Every attempt came back empty."""

    attempts: int


RetryResult = Found[T] | Exhausted


def backoff_delay(
    attempt: int,
    *,
    min_backoff: float,
    factor: float = 1.0,
    max_backoff: float | None = None,
) -> float:
    """Delay before retry number *attempt* (0-based)."""
    delay = min_backoff * (factor**attempt)
    if max_backoff is not None:
        delay = min(delay, max_backoff)
    return delay


async def retry_until_found(
    fetch: Callable[[], Awaitable[T | None]],
    *,
    attempts: int = 5,
    min_backoff: float = 1.0,
    factor: float = 1.0,
    max_backoff: float | None = None,
) -> RetryResult[T]:
    """Call *fetch* until it returns something other than None.

    Args:
        fetch: Zero-argument coroutine function; None means "not yet".
        attempts: Total number of calls, at least 1.
        min_backoff: Delay in seconds before the first retry.
        factor: Multiplier applied to the delay after each retry.
        max_backoff: Upper bound for a single delay.

    Returns:
        Found with the value, or Exhausted after *attempts* empty results.
        Exceptions raised by *fetch* propagate.
    """
    if attempts < 1:
        msg = f"attempts must be at least 1, got {attempts}"
        raise ValueError(msg)

    for attempt in range(attempts):
        value = await fetch()
        if value is not None:
            return Found(value, attempts=attempt + 1)
        if attempt < attempts - 1:
            delay = backoff_delay(
                attempt, min_backoff=min_backoff, factor=factor, max_backoff=max_backoff
            )
            logger.debug("Attempt %d/%d empty, retrying in %.2fs", attempt + 1, attempts, delay)
            await wait(delay)
    return Exhausted(attempts=attempts)
