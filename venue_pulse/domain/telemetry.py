"""Raw first-party telemetry records.

These are the rows a rich-telemetry venue produces: check-ins, wait-time
logs, ratings, vibe photos, scheduled events, and social signals.  They
are inputs to metrics derivation only; scoring never reads them directly.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from venue_pulse.domain.enums import RatingVibe
from venue_pulse.foundation.clock import ensure_aware


class _Timestamped(BaseModel):
    model_config = {"frozen": True}

    @field_validator("*", mode="after")
    @classmethod
    def datetimes_must_be_aware(cls, v):
        if isinstance(v, datetime):
            return ensure_aware(v)
        return v


class CheckIn(_Timestamped):
    venue_id: int
    created_at: datetime
    checked_out_at: Optional[datetime] = None


class WaitTimeLog(_Timestamped):
    venue_id: int
    line_minutes: int = Field(..., ge=0)
    created_at: datetime


class Rating(_Timestamped):
    venue_id: int
    vibe_check: Optional[RatingVibe] = None
    created_at: datetime


class VibePhoto(_Timestamped):
    venue_id: int
    approved: bool = True
    created_at: datetime


class VenueEvent(_Timestamped):
    venue_id: int
    starts_at: datetime


class SocialSignal(_Timestamped):
    venue_id: int
    signal_type: str = Field(..., min_length=1)
    created_at: datetime
