"""Fixed-size batch scheduling with mandatory pauses between calls."""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

log = getLogger(__name__)

DEFAULT_BATCH_SIZE = 20
DEFAULT_ITEM_DELAY_SECONDS = 1.2
DEFAULT_BATCH_DELAY_SECONDS = 2.0

type Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class BatchProgress:
    """Progress snapshot emitted after every processed item."""

    completed: int
    total: int
    percent: int
    batch_index: int
    batch_count: int


@dataclass(frozen=True, slots=True)
class ScheduleResult:
    processed: int
    total: int
    cancelled: bool


def chunk[T](items: Sequence[T], batch_size: int) -> list[list[T]]:
    """Split ``items`` into consecutive batches of at most ``batch_size``."""

    if batch_size < 1:
        raise ValueError("batch_size must be positive")
    return [list(items[start : start + batch_size]) for start in range(0, len(items), batch_size)]


def batch_sizes(total: int, batch_size: int) -> list[int]:
    if batch_size < 1:
        raise ValueError("batch_size must be positive")
    count = math.ceil(total / batch_size)
    return [min(batch_size, total - index * batch_size) for index in range(count)]


def progress_percent(completed: int, total: int) -> int:
    """Round half-up; 100 is reserved for a fully processed run."""

    if total <= 0:
        return 100
    if completed >= total:
        return 100
    percent = math.floor(completed * 100 / total + 0.5)
    return min(percent, 99)


class BatchScheduler:
    """Drive items through a handler one at a time, batch by batch.

    The scheduler waits ``item_delay`` after every item except the very last
    one, and an additional ``batch_delay`` between two batches. ``should_stop``
    is consulted before every item and before every pause.
    """

    def __init__(
        self,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        item_delay: float = DEFAULT_ITEM_DELAY_SECONDS,
        batch_delay: float = DEFAULT_BATCH_DELAY_SECONDS,
        sleep: Sleep | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        if item_delay < 0 or batch_delay < 0:
            raise ValueError("delays must not be negative")
        self.batch_size = batch_size
        self.item_delay = item_delay
        self.batch_delay = batch_delay
        self._sleep: Sleep = sleep or asyncio.sleep

    async def run[T](
        self,
        items: Sequence[T],
        handler: Callable[[T], Awaitable[object]],
        *,
        should_stop: Callable[[], bool],
        on_progress: Callable[[BatchProgress], None] | None = None,
    ) -> ScheduleResult:
        total = len(items)
        batches = chunk(items, self.batch_size)
        processed = 0

        for batch_index, batch in enumerate(batches):
            last_batch = batch_index == len(batches) - 1
            for position, item in enumerate(batch):
                if should_stop():
                    log.info("Stopping after %d of %d items", processed, total)
                    return ScheduleResult(processed=processed, total=total, cancelled=True)

                await handler(item)
                processed += 1
                if on_progress is not None:
                    on_progress(
                        BatchProgress(
                            completed=processed,
                            total=total,
                            percent=progress_percent(processed, total),
                            batch_index=batch_index,
                            batch_count=len(batches),
                        )
                    )

                if last_batch and position == len(batch) - 1:
                    break
                if should_stop():
                    return ScheduleResult(processed=processed, total=total, cancelled=True)
                await self._sleep(self.item_delay)

            if not last_batch:
                if should_stop():
                    return ScheduleResult(processed=processed, total=total, cancelled=True)
                log.debug("Finished batch %d/%d", batch_index + 1, len(batches))
                await self._sleep(self.batch_delay)

        return ScheduleResult(processed=processed, total=total, cancelled=False)
