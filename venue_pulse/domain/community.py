"""Crowd-sourced signal models: reports, pings, and their derived consensus.

Reports and pings are the raw inputs.  CommunityConsensus and
CommunityInfluence are derived on demand from a time window of raw inputs
and are never stored on their own.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from venue_pulse.domain.enums import CrowdEstimate, VibeLevel
from venue_pulse.foundation.clock import ensure_aware, utc_now


class CommunityReport(BaseModel):
    """A structured vibe report from an identified participant."""

    venue_id: int
    participant_id: str = Field(..., min_length=1, max_length=256)
    vibe_level: VibeLevel
    wait_minutes: Optional[int] = Field(None, ge=0, le=180)
    crowd_estimate: Optional[CrowdEstimate] = None
    created_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": True}

    @field_validator("created_at")
    @classmethod
    def created_at_must_be_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)


class AnonymousPing(BaseModel):
    """An "I'm here" ping from an unidentified device."""

    venue_id: int
    device_id: str = Field(..., min_length=1, max_length=256)
    created_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": True}

    @field_validator("created_at")
    @classmethod
    def created_at_must_be_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)


class CommunityConsensus(BaseModel):
    """Aggregate of community signals inside one lookback window."""

    vibe_reports: int = Field(0, description="Reports in window")
    consensus_vibe: Optional[VibeLevel] = Field(
        None, description="Winning label, or None without a qualifying plurality"
    )
    vibe_scores: dict[str, int] = Field(default_factory=dict, description="Votes per label")
    average_wait_minutes: Optional[float] = None
    anonymous_pings: int = 0
    unique_devices: int = 0
    social_signals: int = 0
    data_points: int = Field(0, description="reports + pings + social signals")

    model_config = {"frozen": True}


class CommunityInfluence(BaseModel):
    """How strongly, and in which direction, consensus perturbs a base score."""

    weight: float = Field(0.0, ge=0.0, le=1.0)
    adjustment: float = Field(0.0, ge=-2.0, le=2.0)

    model_config = {"frozen": True}
