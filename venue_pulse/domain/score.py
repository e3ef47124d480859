"""Score: the fused 0–10 activity value with confidence and provenance.

A Score is immutable once produced.  Its validators enforce the two
observable invariants: value is clamped to [0, 10] and rounded to one
decimal place, confidence is clamped to [0.1, 1].  A confidence of
exactly zero is never emitted, so "no data" stays distinguishable from
"impossible".
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from venue_pulse.domain.enums import DataSource
from venue_pulse.foundation.clock import ensure_aware, utc_now

SCORE_MIN = 0.0
SCORE_MAX = 10.0
CONFIDENCE_MIN = 0.1
CONFIDENCE_MAX = 1.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class Score(BaseModel):
    """A venue's fused activity score at a point in time."""

    value: float = Field(..., description="Activity score on the 0–10 scale")
    confidence: float = Field(..., description="Trust in the value (0.1–1)")
    source: DataSource = Field(..., description="Primary provenance of the value")
    computed_at: datetime = Field(default_factory=utc_now)
    breakdown: Optional[dict[str, float]] = Field(
        default=None,
        description="Per-signal contributions, for audit and display",
    )

    model_config = {"frozen": True}

    @field_validator("value")
    @classmethod
    def clamp_and_round_value(cls, v: float) -> float:
        return round(clamp(float(v), SCORE_MIN, SCORE_MAX), 1)

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, v: float) -> float:
        return clamp(float(v), CONFIDENCE_MIN, CONFIDENCE_MAX)

    @field_validator("computed_at")
    @classmethod
    def computed_at_must_be_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)


def default_score(now: datetime | None = None) -> Score:
    """The fallback returned when a venue's evaluation fails unexpectedly."""
    return Score(
        value=5.0,
        confidence=0.3,
        source=DataSource.ESTIMATED,
        computed_at=now or utc_now(),
    )
