"""CommunityConsensusAggregator: crowd reports in, consensus and influence out.

Admission:
    One report per (venue, participant) and one ping per (venue, device)
    inside the rate-limit window, boundary included: a report exactly one
    window old still blocks.  A second report raises RateLimited; a second
    ping is dropped silently.  Submissions for unknown venues are rejected.
    The check-then-insert is not atomic: two concurrent submissions from
    the same participant can both pass the check.

Consensus:
    A label wins only if it holds the highest vote count AND at least 30%
    of all reports.  Labels are tallied in dead → chill → busy → packed
    order and a later label must strictly beat the current leader, so on
    a tie the earlier label in that order wins.

Influence:
    weight     = min(0.4, data_points / 20), raised to min(0.6, weight + 0.2)
                 when a consensus exists over at least 5 reports
    adjustment = label offset (+2 packed, +1 busy, 0 chill, -2 dead)
                 + 1.0 if avg wait ≥ 30 min (else + 0.5 if ≥ 15 min)
                 + 0.5 if ≥ 20 unique ping devices
                 + 0.3 if ≥ 5 social signals
                 clamped to [-2, 2]
    Below 3 data points both are 0.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Callable, Optional

from venue_pulse.domain.community import (
    AnonymousPing,
    CommunityConsensus,
    CommunityInfluence,
    CommunityReport,
)
from venue_pulse.domain.enums import VibeLevel
from venue_pulse.domain.errors import RateLimited, VenueNotFound
from venue_pulse.foundation.clock import utc_now
from venue_pulse.store.base import Store

logger = logging.getLogger(__name__)

# Integer percent keeps the 30% boundary exact
CONSENSUS_PERCENT = 30
MIN_DATA_POINTS = 3

_VIBE_ADJUSTMENT: dict[VibeLevel, float] = {
    VibeLevel.PACKED: 2.0,
    VibeLevel.BUSY: 1.0,
    VibeLevel.CHILL: 0.0,
    VibeLevel.DEAD: -2.0,
}

RescoreNotifier = Callable[[int], None]


class CommunityConsensusAggregator:
    """Rate-limited intake and windowed aggregation of community signals.

    Args:
        store: Where reports and pings are read and written.
        rate_limit_window: How long one submission blocks the next from
            the same participant or device at the same venue.
        default_window_minutes: Lookback used by consensus() when the
            caller does not pass one.
        on_report_accepted: Fire-and-forget hook called with the venue id
            after a report is admitted, typically RescoreQueue.enqueue.
    """

    def __init__(
        self,
        store: Store,
        rate_limit_window: timedelta = timedelta(minutes=60),
        default_window_minutes: int = 60,
        on_report_accepted: Optional[RescoreNotifier] = None,
    ) -> None:
        self._store = store
        self._rate_limit_window = rate_limit_window
        self._default_window_minutes = default_window_minutes
        self._on_report_accepted = on_report_accepted

    def set_report_listener(self, listener: Optional[RescoreNotifier]) -> None:
        self._on_report_accepted = listener

    # ── Intake ───────────────────────────────────────────────────────────

    async def submit_report(self, report: CommunityReport) -> CommunityReport:
        """Admit a report and return the stored copy.

        Raises:
            VenueNotFound: If the report names an unknown venue.
            RateLimited: If the participant reported this venue inside the window.
        """
        if await self._store.get_venue(report.venue_id) is None:
            raise VenueNotFound(report.venue_id)

        now = utc_now()
        recent = await self._store.get_recent_reports(
            report.venue_id, now - self._rate_limit_window
        )
        if any(
            r.participant_id == report.participant_id
            and now - r.created_at <= self._rate_limit_window
            for r in recent
        ):
            logger.info(
                "Rate-limited report from %s for venue %s",
                report.participant_id,
                report.venue_id,
            )
            raise RateLimited(report.venue_id, report.participant_id)

        stored = report.model_copy(update={"created_at": now})
        await self._store.insert_report(stored)
        logger.debug(
            "Accepted %s report for venue %s", stored.vibe_level.value, stored.venue_id
        )
        self._notify(stored.venue_id)
        return stored

    async def submit_ping(self, ping: AnonymousPing) -> bool:
        """Admit a ping; returns False when it was dropped.

        Pings for unknown venues and repeats inside the window are dropped.
        """
        if await self._store.get_venue(ping.venue_id) is None:
            logger.debug("Dropped ping for unknown venue %s", ping.venue_id)
            return False

        now = utc_now()
        recent = await self._store.get_recent_pings(
            ping.venue_id, now - self._rate_limit_window
        )
        if any(
            p.device_id == ping.device_id
            and now - p.created_at <= self._rate_limit_window
            for p in recent
        ):
            logger.debug("Dropped duplicate ping for venue %s", ping.venue_id)
            return False

        await self._store.insert_ping(ping.model_copy(update={"created_at": now}))
        return True

    # ── Aggregation ──────────────────────────────────────────────────────

    async def consensus(
        self, venue_id: int, window_minutes: int | None = None
    ) -> CommunityConsensus:
        minutes = window_minutes if window_minutes is not None else self._default_window_minutes
        since = utc_now() - timedelta(minutes=minutes)

        reports = await self._store.get_recent_reports(venue_id, since)
        pings = await self._store.get_recent_pings(venue_id, since)
        social = await self._store.count_recent_social_signals(venue_id, since)

        return build_consensus(reports, pings, social)

    @staticmethod
    def influence(consensus: CommunityConsensus) -> CommunityInfluence:
        return compute_influence(consensus)

    # ── Internals ────────────────────────────────────────────────────────

    def _notify(self, venue_id: int) -> None:
        if self._on_report_accepted is None:
            return
        try:
            self._on_report_accepted(venue_id)
        except Exception:
            logger.exception("Failed to queue re-score for venue %s", venue_id)


def build_consensus(
    reports: list[CommunityReport],
    pings: list[AnonymousPing],
    social_signals: int,
) -> CommunityConsensus:
    """Pure aggregation of one window's worth of community signals."""
    votes: dict[str, int] = {level.value: 0 for level in VibeLevel}
    wait_total = 0
    wait_reports = 0

    for report in reports:
        votes[report.vibe_level.value] += 1
        if report.wait_minutes:
            wait_total += report.wait_minutes
            wait_reports += 1

    total = sum(votes.values())
    winner: Optional[VibeLevel] = None
    max_votes = 0
    for level in VibeLevel:
        count = votes[level.value]
        if count > max_votes and count * 100 >= total * CONSENSUS_PERCENT:
            max_votes = count
            winner = level

    return CommunityConsensus(
        vibe_reports=total,
        consensus_vibe=winner,
        vibe_scores=votes,
        average_wait_minutes=wait_total / wait_reports if wait_reports else None,
        anonymous_pings=len(pings),
        unique_devices=len({p.device_id for p in pings}),
        social_signals=social_signals,
        data_points=total + len(pings) + social_signals,
    )


def compute_influence(consensus: CommunityConsensus) -> CommunityInfluence:
    if consensus.data_points < MIN_DATA_POINTS:
        return CommunityInfluence(weight=0.0, adjustment=0.0)

    weight = min(0.4, consensus.data_points / 20)
    if consensus.consensus_vibe is not None and consensus.vibe_reports >= 5:
        weight = min(0.6, weight + 0.2)

    adjustment = 0.0
    if consensus.consensus_vibe is not None:
        adjustment = _VIBE_ADJUSTMENT[consensus.consensus_vibe]

    wait = consensus.average_wait_minutes
    if wait:
        if wait >= 30:
            adjustment += 1.0
        elif wait >= 15:
            adjustment += 0.5

    if consensus.unique_devices >= 20:
        adjustment += 0.5
    if consensus.social_signals >= 5:
        adjustment += 0.3

    return CommunityInfluence(weight=weight, adjustment=max(-2.0, min(2.0, adjustment)))
