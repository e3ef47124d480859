"""Tests for the coalescing background re-score queue."""

from __future__ import annotations

import asyncio

import pytest

from venue_pulse.core.community import CommunityConsensusAggregator
from venue_pulse.domain.errors import VenueNotFound
from venue_pulse.services.rescore_queue import RescoreQueue

from tests.helpers import FRIDAY_NIGHT, frozen_clock, report, seeded_store


class Recorder:
    def __init__(self, fail_for: dict[int, Exception] | None = None) -> None:
        self.fail_for = fail_for or {}
        self.refreshed: list[int] = []
        self.seen = asyncio.Event()

    async def __call__(self, venue_id: int) -> None:
        self.refreshed.append(venue_id)
        self.seen.set()
        if venue_id in self.fail_for:
            raise self.fail_for[venue_id]


class TestRescoreQueue:
    @pytest.mark.asyncio
    async def test_duplicates_are_coalesced(self) -> None:
        refresh = Recorder()
        queue = RescoreQueue(refresh)
        assert queue.enqueue(1) is True
        assert queue.enqueue(1) is False
        assert queue.enqueue(2) is True
        assert queue.pending_count == 2

        assert await queue.drain() == 2
        assert refresh.refreshed == [1, 2]
        assert queue.pending_count == 0

    @pytest.mark.asyncio
    async def test_venue_can_be_requeued_after_processing(self) -> None:
        refresh = Recorder()
        queue = RescoreQueue(refresh)
        queue.enqueue(1)
        await queue.drain()
        assert queue.enqueue(1) is True

    @pytest.mark.asyncio
    async def test_failures_do_not_stop_processing(self) -> None:
        refresh = Recorder(fail_for={1: VenueNotFound(1), 2: RuntimeError("boom")})
        queue = RescoreQueue(refresh)
        for venue_id in (1, 2, 3):
            queue.enqueue(venue_id)
        assert await queue.drain() == 3
        assert refresh.refreshed == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_worker_processes_in_background(self) -> None:
        refresh = Recorder()
        queue = RescoreQueue(refresh)
        queue.start()
        assert queue.running
        queue.enqueue(5)
        await asyncio.wait_for(refresh.seen.wait(), timeout=1.0)
        await queue.stop()
        assert refresh.refreshed == [5]
        assert not queue.running

    @pytest.mark.asyncio
    async def test_accepted_reports_feed_the_queue(self) -> None:
        refresh = Recorder()
        queue = RescoreQueue(refresh)
        aggregator = CommunityConsensusAggregator(seeded_store(3), on_report_accepted=queue.enqueue)
        with frozen_clock(FRIDAY_NIGHT):
            await aggregator.submit_report(report("alice", venue_id=3))
            await aggregator.submit_report(report("bob", venue_id=3))
        assert queue.pending_count == 1
        await queue.drain()
        assert refresh.refreshed == [3]
