"""In-memory Store with async-safe access.

Design notes:
    - An asyncio.Lock guards all mutations so concurrent evaluations and
      submissions never corrupt state.
    - Raw telemetry rows are kept per venue; VenueMetrics are derived on
      every read via build_venue_metrics and never stored.
    - Score history and calculation audit rows are append-only.
    - The store does NOT decide what a score means.  It only holds rows
      and answers windowed queries over them.
    - Being in-process, it never raises StoreUnavailable itself.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from datetime import datetime, tzinfo
from typing import Optional

from venue_pulse.core.metrics_builder import build_venue_metrics
from venue_pulse.domain.community import AnonymousPing, CommunityReport
from venue_pulse.domain.history import CalculationRecord, ScoreHistoryEntry
from venue_pulse.domain.metrics import VenueMetrics
from venue_pulse.domain.score import Score
from venue_pulse.domain.telemetry import (
    CheckIn,
    Rating,
    SocialSignal,
    VenueEvent,
    VibePhoto,
    WaitTimeLog,
)
from venue_pulse.domain.venue import Venue

logger = logging.getLogger(__name__)


class StoreSummary:
    """Row counts across the store, for the health endpoint."""

    __slots__ = (
        "total_venues",
        "active_venues",
        "rich_telemetry_venues",
        "scored_venues",
        "reports",
        "pings",
        "history_entries",
    )

    def __init__(
        self,
        total_venues: int = 0,
        active_venues: int = 0,
        rich_telemetry_venues: int = 0,
        scored_venues: int = 0,
        reports: int = 0,
        pings: int = 0,
        history_entries: int = 0,
    ) -> None:
        self.total_venues = total_venues
        self.active_venues = active_venues
        self.rich_telemetry_venues = rich_telemetry_venues
        self.scored_venues = scored_venues
        self.reports = reports
        self.pings = pings
        self.history_entries = history_entries

    def to_dict(self) -> dict:
        return {
            "total_venues": self.total_venues,
            "active_venues": self.active_venues,
            "rich_telemetry_venues": self.rich_telemetry_venues,
            "scored_venues": self.scored_venues,
            "reports": self.reports,
            "pings": self.pings,
            "history_entries": self.history_entries,
        }


class InMemoryStore:
    """Async-safe, in-memory implementation of the Store protocol.

    Args:
        tz: Local timezone of the venues; drives the calendar fields of
            derived metrics (hour of day, day of week).
    """

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz
        self._lock = asyncio.Lock()
        self._venues: dict[int, Venue] = {}

        self._reports: dict[int, list[CommunityReport]] = defaultdict(list)
        self._pings: dict[int, list[AnonymousPing]] = defaultdict(list)
        self._social: dict[int, list[SocialSignal]] = defaultdict(list)

        self._check_ins: dict[int, list[CheckIn]] = defaultdict(list)
        self._wait_logs: dict[int, list[WaitTimeLog]] = defaultdict(list)
        self._ratings: dict[int, list[Rating]] = defaultdict(list)
        self._photos: dict[int, list[VibePhoto]] = defaultdict(list)
        self._events: dict[int, list[VenueEvent]] = defaultdict(list)

        self._history: dict[int, list[ScoreHistoryEntry]] = defaultdict(list)
        self._calculations: dict[int, list[CalculationRecord]] = defaultdict(list)

    # ── Store protocol ───────────────────────────────────────────────────

    async def get_venue(self, venue_id: int) -> Optional[Venue]:
        async with self._lock:
            return self._venues.get(venue_id)

    async def list_active_venues(self) -> list[Venue]:
        async with self._lock:
            return [v for v in self._venues.values() if v.is_active]

    async def get_venue_metrics(self, venue_id: int, now: datetime) -> VenueMetrics:
        async with self._lock:
            return build_venue_metrics(
                venue_id,
                now,
                check_ins=self._check_ins.get(venue_id, ()),
                wait_logs=self._wait_logs.get(venue_id, ()),
                ratings=self._ratings.get(venue_id, ()),
                photos=self._photos.get(venue_id, ()),
                events=self._events.get(venue_id, ()),
                tz=self._tz,
            )

    async def get_recent_reports(self, venue_id: int, since: datetime) -> list[CommunityReport]:
        async with self._lock:
            return [r for r in self._reports.get(venue_id, ()) if r.created_at >= since]

    async def get_recent_pings(self, venue_id: int, since: datetime) -> list[AnonymousPing]:
        async with self._lock:
            return [p for p in self._pings.get(venue_id, ()) if p.created_at >= since]

    async def count_recent_social_signals(self, venue_id: int, since: datetime) -> int:
        async with self._lock:
            return sum(1 for s in self._social.get(venue_id, ()) if s.created_at >= since)

    async def persist_score(self, venue_id: int, score: Score) -> None:
        async with self._lock:
            venue = self._venues.get(venue_id)
            if venue is None:
                logger.warning("Dropping score for unknown venue %s", venue_id)
                return
            self._venues[venue_id] = venue.model_copy(update={"score": score})

    async def append_history(self, venue_id: int, score: Score) -> None:
        entry = ScoreHistoryEntry(
            venue_id=venue_id,
            value=score.value,
            confidence=score.confidence,
            data_sources=[score.source],
            recorded_at=score.computed_at,
        )
        async with self._lock:
            self._history[venue_id].append(entry)

    async def record_calculation(
        self, venue_id: int, score: Score, metrics: VenueMetrics
    ) -> None:
        record = CalculationRecord(
            venue_id=venue_id,
            calculated_value=score.value,
            factors={
                "data_source": score.source.value,
                "confidence": score.confidence,
                **metrics.model_dump(mode="json"),
            },
            recorded_at=score.computed_at,
        )
        async with self._lock:
            self._calculations[venue_id].append(record)

    async def insert_report(self, report: CommunityReport) -> None:
        async with self._lock:
            self._reports[report.venue_id].append(report)

    async def insert_ping(self, ping: AnonymousPing) -> None:
        async with self._lock:
            self._pings[ping.venue_id].append(ping)

    # ── Ingestion ────────────────────────────────────────────────────────

    async def add_venue(self, venue: Venue) -> None:
        async with self._lock:
            self._venues[venue.id] = venue
            logger.info("Registered venue %s (%s)", venue.id, venue.name)

    async def add_check_in(self, check_in: CheckIn) -> None:
        async with self._lock:
            self._check_ins[check_in.venue_id].append(check_in)

    async def add_wait_log(self, log: WaitTimeLog) -> None:
        async with self._lock:
            self._wait_logs[log.venue_id].append(log)

    async def add_rating(self, rating: Rating) -> None:
        async with self._lock:
            self._ratings[rating.venue_id].append(rating)

    async def add_photo(self, photo: VibePhoto) -> None:
        async with self._lock:
            self._photos[photo.venue_id].append(photo)

    async def add_event(self, event: VenueEvent) -> None:
        async with self._lock:
            self._events[event.venue_id].append(event)

    async def add_social_signal(self, signal: SocialSignal) -> None:
        async with self._lock:
            self._social[signal.venue_id].append(signal)

    # ── Queries ──────────────────────────────────────────────────────────

    async def history(self, venue_id: int) -> list[ScoreHistoryEntry]:
        async with self._lock:
            return list(self._history.get(venue_id, ()))

    async def calculations(self, venue_id: int) -> list[CalculationRecord]:
        async with self._lock:
            return list(self._calculations.get(venue_id, ()))

    async def summary(self) -> StoreSummary:
        async with self._lock:
            venues = list(self._venues.values())
            return StoreSummary(
                total_venues=len(venues),
                active_venues=sum(1 for v in venues if v.is_active),
                rich_telemetry_venues=sum(1 for v in venues if v.rich_telemetry),
                scored_venues=sum(1 for v in venues if v.score is not None),
                reports=sum(len(r) for r in self._reports.values()),
                pings=sum(len(p) for p in self._pings.values()),
                history_entries=sum(len(h) for h in self._history.values()),
            )
