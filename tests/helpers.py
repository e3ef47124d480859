"""Shared builders and fakes for the test suite."""

from __future__ import annotations

import asyncio
import concurrent.futures
from datetime import datetime, timezone
from unittest.mock import patch

from venue_pulse.core.busyness_client import ExternalBusynessClient
from venue_pulse.core.community import CommunityConsensusAggregator
from venue_pulse.core.engine import PulseEngine
from venue_pulse.domain.busyness import BusynessReading
from venue_pulse.domain.community import CommunityReport
from venue_pulse.domain.enums import VibeLevel
from venue_pulse.domain.errors import ProviderError
from venue_pulse.domain.metrics import VenueMetrics
from venue_pulse.domain.venue import Venue
from venue_pulse.providers.base import ExternalBusynessProvider
from venue_pulse.store.memory_store import InMemoryStore

# Friday 2 January 2026, 23:00 UTC, inside the weekend-night window
FRIDAY_NIGHT = datetime(2026, 1, 2, 23, 0, 0, tzinfo=timezone.utc)
# Wednesday 7 January 2026, 12:00 UTC, daytime
WEDNESDAY_NOON = datetime(2026, 1, 7, 12, 0, 0, tzinfo=timezone.utc)

CLOCK_TARGETS = (
    "venue_pulse.core.engine.utc_now",
    "venue_pulse.core.community.utc_now",
    "venue_pulse.core.cache.utc_now",
    "venue_pulse.core.busyness_client.utc_now",
)


class frozen_clock:
    """Freeze utc_now() in every core module that reads the clock."""

    def __init__(self, now: datetime) -> None:
        self._patches = [patch(target, return_value=now) for target in CLOCK_TARGETS]

    def __enter__(self) -> "frozen_clock":
        for p in self._patches:
            p.start()
        return self

    def __exit__(self, *exc) -> None:
        for p in reversed(self._patches):
            p.stop()


def metrics(**overrides) -> VenueMetrics:
    base = {
        "venue_id": 1,
        "active_check_ins": 0,
        "day_of_week": 3,
        "hour_of_day": 21,
    }
    base.update(overrides)
    return VenueMetrics(**base)


def venue(venue_id: int = 1, **overrides) -> Venue:
    base = {"id": venue_id, "name": f"Venue {venue_id}"}
    base.update(overrides)
    return Venue(**base)


def seeded_store(*venue_ids: int, **venue_overrides) -> InMemoryStore:
    """An InMemoryStore with the given venues registered, built outside any loop."""
    store = InMemoryStore()
    for venue_id in venue_ids:
        _run_outside_loop(store.add_venue(venue(venue_id, **venue_overrides)))
    return store


def _run_outside_loop(coro) -> None:
    """asyncio.run the coroutine, on a worker thread if a loop is already running."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(coro)
        return
    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
        pool.submit(asyncio.run, coro).result()


def report(
    participant: str = "user-1",
    vibe: VibeLevel = VibeLevel.PACKED,
    venue_id: int = 1,
    **overrides,
) -> CommunityReport:
    return CommunityReport(
        venue_id=venue_id, participant_id=participant, vibe_level=vibe, **overrides
    )


class FakeProvider(ExternalBusynessProvider):
    """Returns a fixed reading (or raises) and counts calls."""

    def __init__(self, current: int = 60, usual: int = 50, error: Exception | None = None) -> None:
        self.current = current
        self.usual = usual
        self.error = error
        self.calls: list[str] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    async def fetch(self, place_id: str) -> BusynessReading:
        self.calls.append(place_id)
        if self.error is not None:
            raise self.error
        return BusynessReading(current_level=self.current, usual_level=self.usual)


class FailingProvider(FakeProvider):
    def __init__(self) -> None:
        super().__init__(error=ProviderError("upstream 503"))


def build_engine(
    store: InMemoryStore,
    provider: ExternalBusynessProvider | None = None,
) -> tuple[PulseEngine, CommunityConsensusAggregator]:
    aggregator = CommunityConsensusAggregator(store)
    busyness = ExternalBusynessClient(provider) if provider is not None else None
    return PulseEngine(store, aggregator, busyness=busyness), aggregator
