"""PulseEngine: per-venue routing, evaluation and degradation.

Flow for calculate(venue_id):
    1. Resolve the venue.  Unknown ids raise VenueNotFound; a store outage
       during resolution propagates as-is so batch callers can record it.
    2. Select one path: RichTelemetryPath for onboarded venues, SparsePath
       for everything else.
    3. Run the path.  StoreUnavailable propagates so callers can keep the
       last persisted score; any other failure inside the path is logged
       and replaced by the fixed default score {5.0, 0.3, ESTIMATED}.

The engine holds no mutable state of its own; all collaborators are
injected.
"""

from __future__ import annotations

import logging
from datetime import tzinfo

from venue_pulse.core.busyness_client import ExternalBusynessClient
from venue_pulse.core.community import CommunityConsensusAggregator
from venue_pulse.core.paths import RichTelemetryPath, ScoringPath, SparsePath
from venue_pulse.domain.errors import StoreUnavailable, VenueNotFound
from venue_pulse.domain.score import Score, default_score
from venue_pulse.domain.venue import Venue
from venue_pulse.foundation.clock import utc_now
from venue_pulse.store.base import Store

logger = logging.getLogger(__name__)


class PulseEngine:
    """Computes one venue's score from whichever signals it has.

    Args:
        store: Venue lookup and telemetry reads.
        aggregator: Community consensus for the sparse path.
        busyness: External busyness client; without one the sparse path
            relies on community signals alone.
        rich_confidence: Fixed confidence for first-party scores.
        tz: Local timezone of the venues, for the time-of-day multiplier.
    """

    def __init__(
        self,
        store: Store,
        aggregator: CommunityConsensusAggregator,
        busyness: ExternalBusynessClient | None = None,
        rich_confidence: float = 0.95,
        tz: tzinfo | None = None,
    ) -> None:
        self._store = store
        self._rich_path = RichTelemetryPath(store, confidence=rich_confidence)
        self._sparse_path = SparsePath(aggregator, busyness=busyness, tz=tz)

    # ── Public API ───────────────────────────────────────────────────────

    async def calculate(self, venue_id: int) -> Score:
        """Score a venue now.

        Raises:
            VenueNotFound: If *venue_id* does not exist.
            StoreUnavailable: If the store fails while resolving or scoring.
        """
        venue = await self._store.get_venue(venue_id)
        if venue is None:
            raise VenueNotFound(venue_id)
        return await self.evaluate(venue)

    async def evaluate(self, venue: Venue) -> Score:
        """Score an already-resolved venue, degrading to the default on failure."""
        path = self.select_path(venue)
        now = utc_now()
        try:
            score = await path.evaluate(venue, now)
        except StoreUnavailable:
            logger.warning("Store unavailable while scoring venue %s", venue.id)
            raise
        except Exception:
            logger.exception(
                "Error calculating score for venue %s via %s path; using default",
                venue.id,
                path.name,
            )
            return default_score(now)

        logger.debug(
            "Venue %s scored %.1f (confidence=%.2f, source=%s)",
            venue.id, score.value, score.confidence, score.source.value,
        )
        return score

    def select_path(self, venue: Venue) -> ScoringPath:
        if venue.rich_telemetry:
            return self._rich_path
        return self._sparse_path
