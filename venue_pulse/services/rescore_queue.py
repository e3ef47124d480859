"""Background re-scoring of venues that just received community input.

Accepted reports call enqueue() and return immediately.  A single worker
task drains the queue through the refresh callable (normally
BatchUpdateCoordinator.update_venue).  A venue already waiting in the
queue is not queued twice.  Nothing here is durable: pending work is lost
on shutdown.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable

from venue_pulse.domain.errors import VenueNotFound

logger = logging.getLogger(__name__)

RefreshFn = Callable[[int], Awaitable[Any]]


class RescoreQueue:
    """Coalescing FIFO of venue ids awaiting a fresh score."""

    def __init__(self, refresh: RefreshFn) -> None:
        self._refresh = refresh
        self._queue: asyncio.Queue[int] = asyncio.Queue()
        self._pending: set[int] = set()
        self._task: asyncio.Task | None = None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def enqueue(self, venue_id: int) -> bool:
        """Queue *venue_id* unless it is already waiting.  Never blocks."""
        if venue_id in self._pending:
            return False
        self._pending.add(venue_id)
        self._queue.put_nowait(venue_id)
        logger.debug("Venue %s queued for score update", venue_id)
        return True

    async def process_next(self) -> int:
        """Wait for one venue id and refresh it; returns the id."""
        venue_id = await self._queue.get()
        self._pending.discard(venue_id)
        try:
            await self._refresh(venue_id)
        except VenueNotFound:
            logger.warning("Queued venue %s no longer exists", venue_id)
        except Exception:
            logger.exception("Queued score update failed for venue %s", venue_id)
        finally:
            self._queue.task_done()
        return venue_id

    async def drain(self) -> int:
        """Process everything queued right now; returns how many were handled."""
        handled = 0
        while not self._queue.empty():
            await self.process_next()
            handled += 1
        return handled

    # ── Worker lifecycle ─────────────────────────────────────────────────

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Re-score worker started")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Re-score worker stopped (%d venue(s) left pending)", self.pending_count)

    async def _run(self) -> None:
        while True:
            await self.process_next()
