"""BatchUpdateCoordinator: bounded-concurrency refresh of many venues.

Execution model:
    - Active venues are ordered rich-telemetry first, then split into
      fixed-size chunks.
    - All venues in a chunk are evaluated concurrently; the next chunk
      starts only once every member of the current one has settled.
      Peak concurrent store connections and provider calls are therefore
      bounded by the chunk size.
    - Each venue runs inside its own failure boundary and yields a
      VenueOutcome instead of raising, so one failure never cancels its
      siblings or later chunks.
    - The summary is a pure fold over the collected outcomes.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from venue_pulse.core.engine import PulseEngine
from venue_pulse.domain.batch import BatchSummary, NotableVenue
from venue_pulse.domain.score import Score
from venue_pulse.domain.venue import Venue
from venue_pulse.store.base import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VenueOutcome:
    """Result of refreshing one venue: a score, or the reason it failed."""

    venue_id: int
    name: str
    score: Optional[Score] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.score is not None


class BatchUpdateCoordinator:
    """Refreshes and persists scores for every active venue.

    Args:
        engine: Computes each venue's score.
        store: Lists venues and persists scores and history.
        chunk_size: How many venues are evaluated concurrently.
        notable_threshold: Minimum score for the notable list.
    """

    def __init__(
        self,
        engine: PulseEngine,
        store: Store,
        chunk_size: int = 10,
        notable_threshold: float = 7.0,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self._engine = engine
        self._store = store
        self._chunk_size = chunk_size
        self._notable_threshold = notable_threshold

    # ── Public API ───────────────────────────────────────────────────────

    async def update_all(self) -> BatchSummary:
        """Refresh every active venue.  Never raises."""
        logger.info("Starting batch score update")
        try:
            venues = await self._store.list_active_venues()
        except Exception:
            logger.exception("Could not list venues for batch update")
            return BatchSummary()

        if not venues:
            logger.info("No venues to update")
            return BatchSummary()

        ordered = sorted(venues, key=lambda v: not v.rich_telemetry)
        logger.info("Found %d venue(s) to update", len(ordered))

        outcomes: list[VenueOutcome] = []
        chunks = 0
        for chunk in partition(ordered, self._chunk_size):
            outcomes.extend(await asyncio.gather(*(self._refresh(v) for v in chunk)))
            chunks += 1
            logger.info("Progress: %d/%d", len(outcomes), len(ordered))

        summary = summarize(outcomes, self._notable_threshold, chunks)
        logger.info(
            "Batch update complete: updated=%d failed=%d notable=%d",
            summary.updated, summary.failed, len(summary.notable),
        )
        for venue in summary.notable:
            logger.info("Notable: %.1f %s", venue.value, venue.name)
        return summary

    async def update_venue(self, venue_id: int) -> Score:
        """Refresh one venue on demand.

        Raises:
            VenueNotFound: If *venue_id* does not exist.
        """
        score = await self._engine.calculate(venue_id)
        await self._persist(venue_id, score)
        return score

    # ── Internals ────────────────────────────────────────────────────────

    async def _refresh(self, venue: Venue) -> VenueOutcome:
        try:
            score = await self._engine.calculate(venue.id)
            await self._persist(venue.id, score)
        except Exception as exc:
            logger.exception("Failed to update venue %s (%s)", venue.id, venue.name)
            return VenueOutcome(venue_id=venue.id, name=venue.name, error=str(exc) or type(exc).__name__)
        return VenueOutcome(venue_id=venue.id, name=venue.name, score=score)

    async def _persist(self, venue_id: int, score: Score) -> None:
        await self._store.persist_score(venue_id, score)
        await self._store.append_history(venue_id, score)


def partition(venues: list[Venue], size: int) -> Iterable[list[Venue]]:
    for start in range(0, len(venues), size):
        yield venues[start:start + size]


def summarize(
    outcomes: list[VenueOutcome],
    notable_threshold: float = 7.0,
    chunks: int = 0,
) -> BatchSummary:
    succeeded = [o for o in outcomes if o.succeeded]
    notable = sorted(
        (
            NotableVenue(
                venue_id=o.venue_id,
                name=o.name,
                value=o.score.value,
                source=o.score.source,
            )
            for o in succeeded
            if o.score.value >= notable_threshold
        ),
        key=lambda n: n.value,
        reverse=True,
    )
    return BatchSummary(
        total=len(outcomes),
        updated=len(succeeded),
        failed=len(outcomes) - len(succeeded),
        chunks=chunks,
        failed_venue_ids=[o.venue_id for o in outcomes if not o.succeeded],
        notable=notable,
    )
