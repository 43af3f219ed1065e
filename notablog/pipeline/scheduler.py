"""Bounded-concurrency executor for per-page work."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from ..lib.log import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_WORKERS = 3


@dataclass(frozen=True)
class TaskOutcome:
    key: str
    ok: bool
    value: Any = None
    error: Optional[str] = None


@dataclass
class BatchResult(Generic[T]):
    outcomes: list[TaskOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[TaskOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> list[TaskOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    def __len__(self) -> int:
        return len(self.outcomes)


async def run_bounded(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[Any]],
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
    key: Callable[[T], str] = str,
    task_timeout: Optional[float] = None,
) -> BatchResult[T]:
    """Run ``fn`` over ``items`` with at most ``max_workers`` in flight.

    Items are started in submission order as workers free up. A failing or
    timed-out item is recorded in the result and logged; it never stops the
    other workers. Returns once every item has finished one way or the other.
    """
    result: BatchResult[T] = BatchResult()
    total = len(items)
    if total == 0:
        return result

    worker_count = max(1, min(max_workers, total))
    queue: asyncio.Queue[Optional[T]] = asyncio.Queue(maxsize=max(worker_count * 2, 1))

    async def _call(item: T) -> Any:
        if task_timeout is not None:
            return await asyncio.wait_for(fn(item), timeout=task_timeout)
        return await fn(item)

    async def _run_one(item: T) -> None:
        item_key = key(item)
        # Each item runs as its own task so a cancellation raised inside it
        # ends that item only, not the worker.
        inner = asyncio.create_task(_call(item))
        try:
            await asyncio.wait({inner})
        except asyncio.CancelledError:
            inner.cancel()
            raise

        if inner.cancelled():
            logger.error("Task cancelled", task=item_key)
            result.outcomes.append(TaskOutcome(item_key, ok=False, error="cancelled"))
            return
        exc = inner.exception()
        if exc is None:
            result.outcomes.append(TaskOutcome(item_key, ok=True, value=inner.result()))
        elif isinstance(exc, asyncio.TimeoutError):
            logger.error("Task timed out", task=item_key, timeout=task_timeout)
            result.outcomes.append(TaskOutcome(item_key, ok=False, error=f"timed out after {task_timeout}s"))
        elif isinstance(exc, (KeyboardInterrupt, SystemExit)):
            raise exc
        else:
            logger.error("Task failed", task=item_key, error=str(exc), exc_type=type(exc).__name__)
            result.outcomes.append(TaskOutcome(item_key, ok=False, error=str(exc) or type(exc).__name__))

    async def _worker() -> None:
        while True:
            item = await queue.get()
            if item is None:
                queue.task_done()
                return
            try:
                await _run_one(item)
            finally:
                queue.task_done()

    workers = [asyncio.create_task(_worker()) for _ in range(worker_count)]
    try:
        for item in items:
            await queue.put(item)

        await queue.join()

        for _ in range(worker_count):
            await queue.put(None)

        await asyncio.gather(*workers)
    except asyncio.CancelledError:
        for worker in workers:
            worker.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        raise

    return result


__all__ = ["BatchResult", "DEFAULT_MAX_WORKERS", "TaskOutcome", "run_bounded"]
