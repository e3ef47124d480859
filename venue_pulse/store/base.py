"""Store protocol: everything the scoring core needs from durable storage.

The engine, aggregator and batch coordinator depend on this protocol only.
Reads and writes are assumed eventually consistent; no transaction spans
the engine's multi-step logic.  Implementations signal outages by raising
StoreUnavailable.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from venue_pulse.domain.community import AnonymousPing, CommunityReport
from venue_pulse.domain.metrics import VenueMetrics
from venue_pulse.domain.score import Score
from venue_pulse.domain.venue import Venue


class Store(Protocol):
    """Async storage contract for venues, signals and score history."""

    async def get_venue(self, venue_id: int) -> Optional[Venue]:
        ...

    async def list_active_venues(self) -> list[Venue]:
        """All venues eligible for batch refresh, in storage order."""
        ...

    async def get_venue_metrics(self, venue_id: int, now: datetime) -> VenueMetrics:
        ...

    async def get_recent_reports(self, venue_id: int, since: datetime) -> list[CommunityReport]:
        ...

    async def get_recent_pings(self, venue_id: int, since: datetime) -> list[AnonymousPing]:
        ...

    async def count_recent_social_signals(self, venue_id: int, since: datetime) -> int:
        ...

    async def persist_score(self, venue_id: int, score: Score) -> None:
        """Replace the venue's current score."""
        ...

    async def append_history(self, venue_id: int, score: Score) -> None:
        ...

    async def record_calculation(
        self, venue_id: int, score: Score, metrics: VenueMetrics
    ) -> None:
        """Audit log of a rich-telemetry calculation and its inputs."""
        ...

    async def insert_report(self, report: CommunityReport) -> None:
        ...

    async def insert_ping(self, ping: AnonymousPing) -> None:
        ...
