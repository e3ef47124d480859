"""Scoring paths: the two ways a venue's score can be computed.

The engine picks exactly one path per evaluation:

    RichTelemetryPath   onboarded venues with first-party telemetry
    SparsePath          everything else: external busyness and community
                        signals blended over a neutral base

Each path is a short pipeline of stages over collaborators injected at
construction, so each branch can be exercised on its own.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, tzinfo

from venue_pulse.core.busyness_client import ExternalBusynessClient
from venue_pulse.core.calculator import (
    compose_score,
    convert_external_scale,
    score_breakdown,
    time_of_day_multiplier,
)
from venue_pulse.core.community import CommunityConsensusAggregator
from venue_pulse.domain.enums import DataSource
from venue_pulse.domain.score import Score
from venue_pulse.domain.venue import Venue
from venue_pulse.foundation.clock import day_of_week
from venue_pulse.store.base import Store

logger = logging.getLogger(__name__)

NEUTRAL_BASE = 5.0
NEUTRAL_CONFIDENCE = 0.5
EXTERNAL_CONFIDENCE = 0.6
COMMUNITY_CONFIDENCE_CAP = 0.8
COMMUNITY_CONFIDENCE_GAIN = 0.3
COMMUNITY_MIN_DATA_POINTS = 3
COMMUNITY_PRIMARY_DATA_POINTS = 10


class ScoringPath(ABC):
    """One strategy for turning a venue into a Score."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def evaluate(self, venue: Venue, now: datetime) -> Score:
        """Compute a score for *venue* as of *now*.  May raise; the engine degrades."""
        ...


class RichTelemetryPath(ScoringPath):
    """First-party metrics through compose_score, at fixed high confidence."""

    def __init__(self, store: Store, confidence: float = 0.95) -> None:
        self._store = store
        self._confidence = confidence

    @property
    def name(self) -> str:
        return "rich_telemetry"

    async def evaluate(self, venue: Venue, now: datetime) -> Score:
        metrics = await self._store.get_venue_metrics(venue.id, now)
        value = compose_score(metrics)

        breakdown = {
            "check_ins": float(metrics.active_check_ins),
            "vibe_score": metrics.recent_sentiment,
            **score_breakdown(metrics),
        }
        if metrics.reported_wait_minutes is not None:
            breakdown["wait_time"] = float(metrics.reported_wait_minutes)

        score = Score(
            value=value,
            confidence=self._confidence,
            source=DataSource.RICH_TELEMETRY,
            computed_at=now,
            breakdown=breakdown,
        )

        await self._store.record_calculation(venue.id, score, metrics)
        return score


class SparsePath(ScoringPath):
    """Neutral base, optionally replaced by external data, nudged by the community.

    Stages:
        1. base 5.0, confidence 0.5, ESTIMATED
        2. usable external sample (current > 0) → converted level, 0.6, EXTERNAL
        3. community blend: base*(1-w) + (base+adj)*w, confidence + 0.3w (≤ 0.8);
           COMMUNITY provenance once there are ≥ 10 data points
        4. time-of-day multiplier at evaluation time
    """

    def __init__(
        self,
        aggregator: CommunityConsensusAggregator,
        busyness: ExternalBusynessClient | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self._aggregator = aggregator
        self._busyness = busyness
        self._tz = tz

    @property
    def name(self) -> str:
        return "sparse"

    async def evaluate(self, venue: Venue, now: datetime) -> Score:
        base = NEUTRAL_BASE
        confidence = NEUTRAL_CONFIDENCE
        source = DataSource.ESTIMATED
        external_level = 0

        # ── External busyness ────────────────────────────────────────
        if venue.external_place_id and self._busyness is not None:
            sample = await self._busyness.get_busyness(venue.external_place_id)
            if sample is not None and sample.current_level > 0:
                base = convert_external_scale(sample.current_level)
                external_level = sample.current_level
                confidence = EXTERNAL_CONFIDENCE
                source = DataSource.EXTERNAL

        # ── Community blend ──────────────────────────────────────────
        consensus = await self._aggregator.consensus(venue.id)
        if consensus.data_points >= COMMUNITY_MIN_DATA_POINTS:
            influence = self._aggregator.influence(consensus)
            w = influence.weight
            if w > 0:
                base = base * (1 - w) + (base + influence.adjustment) * w
                confidence = min(COMMUNITY_CONFIDENCE_CAP, confidence + w * COMMUNITY_CONFIDENCE_GAIN)
                if consensus.data_points >= COMMUNITY_PRIMARY_DATA_POINTS:
                    source = DataSource.COMMUNITY

        # ── Calendar ─────────────────────────────────────────────────
        local = now.astimezone(self._tz) if self._tz else now
        base *= time_of_day_multiplier(local.hour, day_of_week(local))

        logger.debug(
            "Sparse score for venue %s: %.2f (%s, external=%d, community=%d)",
            venue.id, base, source.value, external_level, consensus.data_points,
        )

        return Score(
            value=base,
            confidence=confidence,
            source=source,
            computed_at=now,
            breakdown={
                "external_level": float(external_level),
                "community_data_points": float(consensus.data_points),
            },
        )
