"""VenueMetrics: the rich-telemetry input to the score calculator.

Metrics are ephemeral: they are recomputed for every evaluation from the
store's raw telemetry and never persisted as an entity.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from venue_pulse.domain.enums import CheckInTrend


class VenueMetrics(BaseModel):
    """First-party activity observed at a venue around evaluation time."""

    venue_id: int

    # Check-ins
    active_check_ins: int = Field(0, ge=0, description="Checked in and not yet checked out")
    check_ins_last_30_min: int = Field(0, ge=0)
    check_ins_last_hour: int = Field(0, ge=0)
    check_ins_prior_hour: int = Field(0, ge=0, description="Check-ins between 2h and 1h ago")
    check_in_trend: CheckInTrend = CheckInTrend.STABLE

    # Wait times
    reported_wait_minutes: Optional[int] = Field(None, ge=0)

    # Ratings & vibes
    recent_ratings: int = Field(0, ge=0)
    recent_sentiment: float = Field(0.0, ge=-1.0, le=1.0)
    vibe_photo_count: int = Field(0, ge=0)

    # Calendar context
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday … 6 = Saturday")
    hour_of_day: int = Field(..., ge=0, le=23)
    is_special_event: bool = False

    model_config = {"frozen": True}
