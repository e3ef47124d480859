"""Score calculation: pure, deterministic functions.

Design principles:
    1. Pure functions: metrics in, numbers out.
    2. No side effects, no state, no I/O.
    3. Total over their documented input ranges; out-of-range input is
       clamped, never rejected.

Rich-telemetry score:
    score = (activity + momentum + vibe + wait) * time_of_day * event
    clamped to [0, 10], rounded to one decimal.

    - activity  is the base, assigned from the active check-in count
    - momentum  ∈ {-0.5, 0, +0.5, +1.0} from the check-in trend
    - vibe      ∈ [0, 1] from sentiment and recent photo activity
    - wait      ∈ [0, 2] from the reported wait time
    - event     1.2 during a special event, otherwise 1.0

External scale conversion:
    The provider's 0–100 busyness maps onto [3.0, 9.5].  Nightlife venues
    rarely read 100, so the upper bands are compressed.  An open venue
    with no signal floors at 3.0, not 0.
"""

from __future__ import annotations

from typing import Optional

from venue_pulse.domain.enums import CheckInTrend, DataSource
from venue_pulse.domain.metrics import VenueMetrics

# (minimum active check-ins, base score), evaluated top-down
_ACTIVITY_STEPS: tuple[tuple[int, float], ...] = (
    (100, 9.0),
    (75, 8.5),
    (50, 8.0),
    (30, 7.0),
    (20, 6.5),
    (15, 6.0),
    (10, 5.5),
    (5, 5.0),
    (2, 4.5),
    (1, 4.0),
)
_ACTIVITY_FLOOR = 3.0

_MOMENTUM: dict[CheckInTrend, float] = {
    CheckInTrend.SURGING: 1.0,
    CheckInTrend.INCREASING: 0.5,
    CheckInTrend.STABLE: 0.0,
    CheckInTrend.DECREASING: -0.5,
}

_WAIT_STEPS: tuple[tuple[int, float], ...] = (
    (45, 2.0),
    (30, 1.5),
    (20, 1.0),
    (10, 0.7),
    (5, 0.5),
)

# (lower bound, base, divisor): score = base + (level - lower) / divisor
_EXTERNAL_BANDS: tuple[tuple[int, float, float], ...] = (
    (80, 8.5, 20.0),
    (70, 7.5, 20.0),
    (60, 7.0, 40.0),
    (50, 6.5, 40.0),
    (40, 6.0, 40.0),
    (30, 5.5, 40.0),
    (20, 5.0, 40.0),
    (10, 4.0, 20.0),
    (0, 3.0, 10.0),
)
_EXTERNAL_CEILING = 9.5
_EXTERNAL_FLOOR = 3.0

_SOURCE_CONFIDENCE: dict[DataSource, float] = {
    DataSource.RICH_TELEMETRY: 0.9,
    DataSource.COMMUNITY: 0.7,
    DataSource.EXTERNAL: 0.6,
    DataSource.ESTIMATED: 0.5,
}

SPECIAL_EVENT_MULTIPLIER = 1.2


# ── Components ───────────────────────────────────────────────────────────────

def activity_component(active_count: int) -> float:
    """Base score from the number of currently checked-in guests."""
    for minimum, value in _ACTIVITY_STEPS:
        if active_count >= minimum:
            return value
    return _ACTIVITY_FLOOR


def momentum_boost(trend: CheckInTrend) -> float:
    return _MOMENTUM.get(trend, 0.0)


def vibe_boost(sentiment: float, artifact_count: int) -> float:
    """Up to 0.5 from sentiment plus up to 0.5 from photo activity, capped at 1."""
    boost = 0.0

    if sentiment > 0.7:
        boost += 0.5
    elif sentiment > 0.3:
        boost += 0.3
    elif sentiment > 0:
        boost += 0.1

    if artifact_count >= 10:
        boost += 0.5
    elif artifact_count >= 5:
        boost += 0.3
    elif artifact_count >= 2:
        boost += 0.2
    elif artifact_count > 0:
        boost += 0.1

    return min(1.0, boost)


def wait_time_boost(minutes: Optional[float]) -> float:
    if not minutes:
        return 0.0
    for minimum, value in _WAIT_STEPS:
        if minutes >= minimum:
            return value
    return 0.0


def time_of_day_multiplier(hour: int, day_of_week: int) -> float:
    """Calendar multiplier; day_of_week uses Sunday = 0.

    Windows are checked in order and the first match wins.  Hours no
    window covers (e.g. 2am on a Tuesday) fall through to 1.0.
    """
    # Weekend nights: Thu–Sun, 10pm–2am
    if (day_of_week >= 4 or day_of_week == 0) and (hour >= 22 or hour <= 2):
        return 1.15
    # Regular evenings: 8pm–midnight
    if hour >= 20 or hour == 0:
        return 1.10
    # Weekday happy hour: Mon–Fri, 5–7pm
    if 1 <= day_of_week <= 5 and 17 <= hour <= 19:
        return 1.05
    # Early-week late night
    if 1 <= day_of_week <= 3 and (hour >= 23 or hour <= 1):
        return 0.90
    if 6 <= hour < 17:
        return 0.70
    if 3 <= hour < 6:
        return 0.50
    return 1.0


# ── Composition ──────────────────────────────────────────────────────────────

def score_breakdown(metrics: VenueMetrics) -> dict[str, float]:
    """Every component compose_score uses, keyed by name."""
    return {
        "activity": activity_component(metrics.active_check_ins),
        "momentum": momentum_boost(metrics.check_in_trend),
        "vibe": vibe_boost(metrics.recent_sentiment, metrics.vibe_photo_count),
        "wait": wait_time_boost(metrics.reported_wait_minutes),
        "time_multiplier": time_of_day_multiplier(metrics.hour_of_day, metrics.day_of_week),
        "event_multiplier": SPECIAL_EVENT_MULTIPLIER if metrics.is_special_event else 1.0,
    }


def compose_score(metrics: VenueMetrics) -> float:
    """Final bounded score for a rich-telemetry venue."""
    parts = score_breakdown(metrics)

    score = parts["activity"]
    score += parts["momentum"]
    score += parts["vibe"]
    score += parts["wait"]

    score *= parts["time_multiplier"]
    score *= parts["event_multiplier"]

    return round(max(0.0, min(10.0, score)), 1)


def convert_external_scale(level: float) -> float:
    """Map a provider busyness level (0–100) onto the 3.0–9.5 score range."""
    level = max(0.0, min(100.0, float(level)))
    if level >= 90:
        return _EXTERNAL_CEILING
    if level <= 0:
        return _EXTERNAL_FLOOR
    for lower, base, divisor in _EXTERNAL_BANDS:
        if level >= lower:
            return base + (level - lower) / divisor
    return _EXTERNAL_FLOOR


# ── Confidence ───────────────────────────────────────────────────────────────

def confidence(data_points: int, age_minutes: float, source: DataSource) -> float:
    """Confidence in a score given evidence volume, freshness and provenance."""
    value = _SOURCE_CONFIDENCE.get(source, 0.5)

    if data_points >= 20:
        value += 0.10
    elif data_points >= 10:
        value += 0.05
    elif data_points < 3:
        value -= 0.20

    if age_minutes < 15:
        value += 0.05
    elif age_minutes > 60:
        value -= 0.10
        # Very stale data takes the extra penalty on top
        if age_minutes > 120:
            value -= 0.20

    return max(0.1, min(1.0, value))
