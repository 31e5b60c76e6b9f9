"""Bounded background queue for cache writes.

Classification results are handed off without waiting; a fixed set of
worker tasks drains the queue. When the queue is full new writes are
dropped with a warning rather than growing memory without bound.
"""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from typing import TYPE_CHECKING

from label_analyzer.cache.store import DEFAULT_TTL_DAYS
from label_analyzer.observability.logging import get_logger


if TYPE_CHECKING:
    from label_analyzer.cache.store import CacheStoreProtocol
    from label_analyzer.schemas.enums import IngredientStatus

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CacheWrite:
    """A pending cache upsert."""

    name: str
    status: IngredientStatus
    educational_note: str
    basic_note: str


class BackgroundCacheWriter:
    """Fire-and-forget cache writer with an explicit start/stop lifecycle."""

    def __init__(
        self,
        store: CacheStoreProtocol,
        *,
        max_queue_size: int = 500,
        workers: int = 2,
        ttl_days: int = DEFAULT_TTL_DAYS,
    ) -> None:
        """Initialize the writer.

        Args:
            store: Cache store receiving the upserts.
            max_queue_size: Pending writes kept before new ones are dropped.
            workers: Number of worker tasks draining the queue.
            ttl_days: Logical lifetime of written entries.
        """
        self._store = store
        self._queue: asyncio.Queue[CacheWrite] = asyncio.Queue(maxsize=max_queue_size)
        self._worker_count = max(workers, 1)
        self._ttl_days = ttl_days
        self._workers: list[asyncio.Task[None]] = []
        self._dropped = 0

    @property
    def pending(self) -> int:
        """Number of queued writes."""
        return self._queue.qsize()

    @property
    def dropped(self) -> int:
        """Writes dropped because the queue was full."""
        return self._dropped

    @property
    def is_running(self) -> bool:
        """Whether worker tasks are active."""
        return bool(self._workers)

    async def start(self) -> None:
        """Start the worker tasks."""
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._run(), name=f"cache-writer-{i}")
            for i in range(self._worker_count)
        ]
        logger.info("BackgroundCacheWriter started", workers=self._worker_count)

    async def stop(self) -> None:
        """Drain pending writes, then cancel the workers."""
        if not self._workers:
            return
        await self._queue.join()
        for task in self._workers:
            task.cancel()
        for task in self._workers:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._workers = []
        logger.info("BackgroundCacheWriter stopped", dropped=self._dropped)

    def enqueue(self, write: CacheWrite) -> bool:
        """Queue a write without waiting.

        Returns:
            False if the queue was full and the write was dropped.
        """
        try:
            self._queue.put_nowait(write)
        except asyncio.QueueFull:
            self._dropped += 1
            logger.warning(
                "Cache write queue full, dropping write",
                ingredient=write.name,
                dropped=self._dropped,
            )
            return False
        return True

    async def _run(self) -> None:
        while True:
            write = await self._queue.get()
            try:
                await self._store.upsert(
                    write.name,
                    write.status,
                    write.educational_note,
                    write.basic_note,
                    ttl_days=self._ttl_days,
                )
            except Exception:
                logger.exception("Background cache write failed", ingredient=write.name)
            finally:
                self._queue.task_done()
