"""Derive VenueMetrics from raw telemetry rows.

Windows are measured back from the evaluation time *now*:
    - check-ins: last 2 hours (active = not checked out yet)
    - wait times, ratings, photos: last hour
    - special event: an event starting within the next 4 hours

Trend classification compares the three check-in windows:
    - SURGING:     last 30 min > 60% of the last hour
    - INCREASING:  last hour > 1.2 × the hour before
    - DECREASING:  last hour < 0.8 × the hour before
    - STABLE:      everything else
"""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Iterable, Optional

from venue_pulse.domain.enums import CheckInTrend, RatingVibe
from venue_pulse.domain.metrics import VenueMetrics
from venue_pulse.domain.telemetry import CheckIn, Rating, VenueEvent, VibePhoto, WaitTimeLog
from venue_pulse.foundation.clock import day_of_week

SENTIMENT: dict[RatingVibe, float] = {
    RatingVibe.FIRE: 1.0,
    RatingVibe.GOOD: 0.5,
    RatingVibe.MID: -0.5,
    RatingVibe.DEAD: -1.0,
}

CHECK_IN_LOOKBACK = timedelta(hours=2)
RECENT_WINDOW = timedelta(hours=1)
SURGE_WINDOW = timedelta(minutes=30)
EVENT_LOOKAHEAD = timedelta(hours=4)


def classify_trend(last_30_min: int, last_hour: int, prior_hour: int) -> CheckInTrend:
    if last_30_min > last_hour * 0.6:
        return CheckInTrend.SURGING
    if last_hour > prior_hour * 1.2:
        return CheckInTrend.INCREASING
    if last_hour < prior_hour * 0.8:
        return CheckInTrend.DECREASING
    return CheckInTrend.STABLE


def mean_sentiment(ratings: list[Rating]) -> float:
    """Average vibe-check sentiment; unlabelled ratings count as "mid"."""
    if not ratings:
        return 0.0
    total = sum(SENTIMENT[r.vibe_check or RatingVibe.MID] for r in ratings)
    return total / len(ratings)


def build_venue_metrics(
    venue_id: int,
    now: datetime,
    *,
    check_ins: Iterable[CheckIn] = (),
    wait_logs: Iterable[WaitTimeLog] = (),
    ratings: Iterable[Rating] = (),
    photos: Iterable[VibePhoto] = (),
    events: Iterable[VenueEvent] = (),
    tz: tzinfo | None = None,
) -> VenueMetrics:
    """Collapse raw rows into a single VenueMetrics observation at *now*."""
    hour_ago = now - RECENT_WINDOW
    half_hour_ago = now - SURGE_WINDOW

    window = [c for c in check_ins if now - CHECK_IN_LOOKBACK <= c.created_at <= now]
    active = sum(1 for c in window if c.checked_out_at is None)
    last_30 = sum(1 for c in window if c.created_at >= half_hour_ago)
    last_hour = sum(1 for c in window if c.created_at >= hour_ago)
    prior_hour = len(window) - last_hour

    recent_ratings = [r for r in ratings if hour_ago <= r.created_at <= now]
    recent_photos = sum(1 for p in photos if p.approved and hour_ago <= p.created_at <= now)
    special_event = any(now <= e.starts_at <= now + EVENT_LOOKAHEAD for e in events)

    local = now.astimezone(tz) if tz else now

    return VenueMetrics(
        venue_id=venue_id,
        active_check_ins=active,
        check_ins_last_30_min=last_30,
        check_ins_last_hour=last_hour,
        check_ins_prior_hour=prior_hour,
        check_in_trend=classify_trend(last_30, last_hour, prior_hour),
        reported_wait_minutes=_latest_wait(wait_logs, hour_ago, now),
        recent_ratings=len(recent_ratings),
        recent_sentiment=mean_sentiment(recent_ratings),
        vibe_photo_count=recent_photos,
        day_of_week=day_of_week(local),
        hour_of_day=local.hour,
        is_special_event=special_event,
    )


def _latest_wait(logs: Iterable[WaitTimeLog], since: datetime, now: datetime) -> Optional[int]:
    recent = [log for log in logs if since <= log.created_at <= now]
    if not recent:
        return None
    latest = max(recent, key=lambda log: log.created_at)
    return latest.line_minutes or None
