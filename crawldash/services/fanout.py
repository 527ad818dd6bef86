"""Bounded concurrent fan-out with per-item outcomes."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ItemResult(Generic[T]):
    item: T
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def fan_out(
    items: Sequence[T],
    func: Callable[[T], Awaitable[Any]],
    concurrency: int = 5,
) -> List[ItemResult[T]]:
    """Run ``func(item)`` for every item with at most *concurrency* in flight.

    Every call runs to completion; a failure on one item never cancels the
    others. Results come back in input order, one :class:`ItemResult` each.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    semaphore = asyncio.Semaphore(concurrency)

    async def run_with_limit(item: T) -> Any:
        async with semaphore:
            return await func(item)

    outcomes = await asyncio.gather(*(run_with_limit(item) for item in items), return_exceptions=True)

    results: List[ItemResult[T]] = []
    for item, outcome in zip(items, outcomes):
        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
        if isinstance(outcome, BaseException):
            logger.debug("Fan-out call for %s failed: %s", item, outcome)
            results.append(ItemResult(item=item, error=outcome))
        else:
            results.append(ItemResult(item=item, value=outcome))
    return results
