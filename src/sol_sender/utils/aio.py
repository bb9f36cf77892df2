"""Asyncio helpers — delays, cancellation tokens, scopes and racing.

``CancelToken`` is the single cancellation primitive shared by every task
working on one submission. ``CancelScope`` owns the tasks spawned for that
submission and sets its own token exactly once when the scope exits,
whatever the exit path. A caller token passed to the scope is only
observed: it cancels the scope, never the other way round.
``first_completed`` races awaitables and reaps the losers.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine
    from types import TracebackType

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def wait(seconds: float) -> None:
    """Suspend the current task for *seconds*."""
    await asyncio.sleep(seconds)


class CancelToken:
    """Single-shot broadcast cancellation flag.

    Once cancelled the token stays cancelled; every waiter observes it.
    A token created with a *parent* is cancelled together with the parent,
    but cancelling the child never touches the parent.
    """

    def __init__(self, parent: CancelToken | None = None) -> None:
        self._event = asyncio.Event()
        self._parent = parent
        self._children: set[CancelToken] = set()
        if parent is not None:
            if parent.cancelled:
                self._event.set()
            else:
                parent._children.add(self)

    @property
    def cancelled(self) -> bool:
        """Whether the token has been set."""
        return self._event.is_set()

    def cancel(self) -> bool:
        """Set the token. Returns True only for the call that set it."""
        if self._event.is_set():
            return False
        self._event.set()
        children, self._children = self._children, set()
        for child in children:
            child.cancel()
        if self._parent is not None:
            self._parent._children.discard(self)
        return True

    def child(self) -> CancelToken:
        """Return a new token linked to this one."""
        return CancelToken(parent=self)

    async def wait(self) -> None:
        """Block until the token is set."""
        await self._event.wait()

    async def sleep(self, seconds: float) -> bool:
        """Sleep up to *seconds*, waking early on cancellation.

        Returns:
            True if the token is set, False if the full delay elapsed.
        """
        if self._event.is_set():
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except TimeoutError:
            return False
        return True


class CancelScope:
    """Owns a token and the tasks spawned under it.

    With a *parent* token the scope token is a child of it: setting the
    parent aborts the scope, leaving the scope leaves the parent untouched.

    Usage::

        async with CancelScope() as scope:
            scope.spawn(loop(scope.token))
            result = await work(scope.token)
        # scope token set, every spawned task finished
    """

    def __init__(self, parent: CancelToken | None = None) -> None:
        self.token = CancelToken(parent=parent)
        self._tasks: list[asyncio.Task[Any]] = []

    def spawn(self, coro: Coroutine[Any, Any, T], *, name: str | None = None) -> asyncio.Task[T]:
        """Schedule *coro* as a task owned by this scope."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.append(task)
        return task

    async def __aenter__(self) -> CancelScope:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.token.cancel()
        for task in self._tasks:
            if not task.done():
                task.cancel()
        results = await asyncio.gather(*self._tasks, return_exceptions=True)
        for r in results:
            if isinstance(r, Exception):
                logger.error("Scoped task error during shutdown: %s", r)
        self._tasks.clear()


def _accept_any(_: object) -> bool:
    return True


async def first_completed(
    *aws: Awaitable[T],
    accept: Callable[[T], bool] = _accept_any,
) -> T:
    """Run *aws* concurrently and return the first accepted result.

    Results rejected by *accept* do not win; if every awaitable finishes
    without an accepted result, the last result seen is returned. An
    exception from any awaitable propagates. Remaining tasks are cancelled
    and reaped before returning.
    """
    if not aws:
        msg = "first_completed() needs at least one awaitable"
        raise ValueError(msg)

    tasks = [asyncio.ensure_future(aw) for aw in aws]
    pending = set(tasks)
    last: Any = None
    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            # Argument order breaks ties between tasks finishing in the same tick.
            for task in tasks:
                if task in done:
                    result = task.result()
                    if accept(result):
                        return result
                    last = result
        return last
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
