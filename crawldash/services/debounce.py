"""Trailing-edge debounce on top of asyncio tasks."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, Set, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Call *callback* with the latest value once input has been quiet for *delay* seconds.

    Each :meth:`trigger` bumps a revision counter and replaces the pending
    task. A task whose revision is no longer the latest discards itself
    when it wakes up, so a late firing can never act on stale input.
    Cancelling only stops a call from being *started*; a callback already
    running is left alone.
    """

    def __init__(self, delay: float, callback: Callable[[T], Awaitable[Any]]) -> None:
        self.delay = delay
        self._callback = callback
        self._revision = 0
        self._task: Optional[asyncio.Task] = None
        # The loop only holds weak references to tasks.
        self._running: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, value: T) -> None:
        self._revision += 1
        self._cancel_pending()
        self._task = asyncio.get_running_loop().create_task(self._fire(self._revision, value))

    def cancel(self) -> None:
        self._revision += 1
        self._cancel_pending()

    def _cancel_pending(self) -> None:
        if self.pending:
            self._task.cancel()

    async def _fire(self, revision: int, value: T) -> None:
        await asyncio.sleep(self.delay)
        if revision != self._revision:
            logger.debug("Debounce revision %d superseded by %d", revision, self._revision)
            return
        # Detach so cancel() from inside the callback does not cancel us.
        task = asyncio.current_task()
        self._task = None
        self._running.add(task)
        try:
            await self._callback(value)
        finally:
            self._running.discard(task)
