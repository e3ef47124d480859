"""Controlled enumerations for the venue-pulse domain.

Every categorical field in the domain MUST reference an enum defined here.
Free-form strings are not acceptable for classification fields.
"""

from __future__ import annotations

from enum import Enum


class DataSource(str, Enum):
    """Provenance of a score: which signal family produced it."""

    RICH_TELEMETRY = "rich_telemetry"
    COMMUNITY = "community"
    EXTERNAL = "external"
    ESTIMATED = "estimated"


class CheckInTrend(str, Enum):
    """Direction of first-party check-in activity."""

    SURGING = "surging"
    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


class VibeLevel(str, Enum):
    """Crowd-reported vibe labels, in tally order."""

    DEAD = "dead"
    CHILL = "chill"
    BUSY = "busy"
    PACKED = "packed"


class CrowdEstimate(str, Enum):
    """Reporter's estimate of how full the venue is."""

    EMPTY = "0%"
    QUARTER = "25%"
    HALF = "50%"
    THREE_QUARTERS = "75%"
    FULL = "100%"


class RelativeLevel(str, Enum):
    """Current busyness relative to the usual level for this hour."""

    LOW = "low"
    BELOW_AVERAGE = "below_average"
    AVERAGE = "average"
    ABOVE_AVERAGE = "above_average"
    HIGH = "high"


class BusynessTrend(str, Enum):
    """Whether the venue is busier or quieter than usual right now."""

    DECREASING = "decreasing"
    STABLE = "stable"
    INCREASING = "increasing"


class RatingVibe(str, Enum):
    """Vibe check attached to a first-party rating."""

    FIRE = "fire"
    GOOD = "good"
    MID = "mid"
    DEAD = "dead"
