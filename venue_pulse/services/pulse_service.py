"""PulseService: the public API of the scoring core.

Wires the store, busyness client, aggregator, engine, batch coordinator
and re-score queue together behind six operations:

    calculate(venue_id)                 → Score (raises VenueNotFound)
    update_all()                        → BatchSummary (never raises)
    update_venue(venue_id)              → Score (raises VenueNotFound)
    submit_vibe_report(report)          → CommunityReport (raises RateLimited, VenueNotFound)
    submit_ping(ping)                   → bool (never raises)
    get_community_consensus(venue_id)   → CommunityConsensus
"""

from __future__ import annotations

import logging
from datetime import timedelta
from zoneinfo import ZoneInfo

from venue_pulse.config import Settings
from venue_pulse.core.batch import BatchUpdateCoordinator
from venue_pulse.core.busyness_client import ExternalBusynessClient
from venue_pulse.core.cache import TimeBoxedCache
from venue_pulse.core.community import CommunityConsensusAggregator
from venue_pulse.core.engine import PulseEngine
from venue_pulse.domain.batch import BatchSummary
from venue_pulse.domain.community import AnonymousPing, CommunityConsensus, CommunityReport
from venue_pulse.domain.score import Score
from venue_pulse.providers.base import ExternalBusynessProvider
from venue_pulse.providers.serpapi import SerpApiBusynessProvider
from venue_pulse.services.rescore_queue import RescoreQueue
from venue_pulse.store.base import Store

logger = logging.getLogger(__name__)


class PulseService:
    def __init__(
        self,
        engine: PulseEngine,
        coordinator: BatchUpdateCoordinator,
        aggregator: CommunityConsensusAggregator,
        rescore_queue: RescoreQueue | None = None,
        busyness: ExternalBusynessClient | None = None,
    ) -> None:
        self.engine = engine
        self.coordinator = coordinator
        self.aggregator = aggregator
        self.rescore_queue = rescore_queue
        self.busyness = busyness

    @property
    def busyness_cache(self) -> TimeBoxedCache | None:
        return self.busyness.cache if self.busyness is not None else None

    async def calculate(self, venue_id: int) -> Score:
        return await self.engine.calculate(venue_id)

    async def update_all(self) -> BatchSummary:
        return await self.coordinator.update_all()

    async def update_venue(self, venue_id: int) -> Score:
        return await self.coordinator.update_venue(venue_id)

    async def submit_vibe_report(self, report: CommunityReport) -> CommunityReport:
        return await self.aggregator.submit_report(report)

    async def submit_ping(self, ping: AnonymousPing) -> bool:
        """Best effort: storage failures are logged and reported as not admitted."""
        try:
            return await self.aggregator.submit_ping(ping)
        except Exception:
            logger.exception("Failed to record ping for venue %s", ping.venue_id)
            return False

    async def get_community_consensus(
        self, venue_id: int, window_minutes: int | None = None
    ) -> CommunityConsensus:
        return await self.aggregator.consensus(venue_id, window_minutes)


def create_pulse_service(
    store: Store,
    settings: Settings,
    provider: ExternalBusynessProvider | None = None,
) -> PulseService:
    """Build a fully wired PulseService from settings.

    Without an explicit *provider*, a SerpAPI provider is created from the
    settings; with an empty API key it degrades every lookup to "no data".
    """
    tz = ZoneInfo(settings.venue_timezone)

    provider = provider or SerpApiBusynessProvider(
        api_key=settings.serpapi_api_key,
        base_url=settings.serpapi_base_url,
        timeout=settings.provider_timeout_seconds,
        tz=tz,
    )
    busyness = ExternalBusynessClient(
        provider,
        cache=TimeBoxedCache(ttl=timedelta(seconds=settings.busyness_cache_ttl_seconds)),
    )

    aggregator = CommunityConsensusAggregator(
        store,
        rate_limit_window=timedelta(minutes=settings.rate_limit_window_minutes),
        default_window_minutes=settings.consensus_window_minutes,
    )
    engine = PulseEngine(
        store,
        aggregator,
        busyness=busyness,
        rich_confidence=settings.rich_telemetry_confidence,
        tz=tz,
    )
    coordinator = BatchUpdateCoordinator(
        engine,
        store,
        chunk_size=settings.batch_chunk_size,
        notable_threshold=settings.notable_threshold,
    )

    rescore_queue = None
    if settings.rescore_queue_enabled:
        rescore_queue = RescoreQueue(coordinator.update_venue)
        aggregator.set_report_listener(rescore_queue.enqueue)

    return PulseService(engine, coordinator, aggregator, rescore_queue, busyness)
