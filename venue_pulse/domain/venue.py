"""Venue: the unit of scoring.

A Venue knows whether it is onboarded for rich telemetry, where to find
it at the external busyness provider, and the last score persisted for
it.  Only the store's persist step replaces the score.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from venue_pulse.domain.score import Score


class Venue(BaseModel):
    id: int
    name: str = Field(..., min_length=1)
    external_place_id: Optional[str] = Field(
        None, description="Identifier at the external busyness provider"
    )
    rich_telemetry: bool = Field(False, description="Onboarded for first-party telemetry")
    is_active: bool = True
    score: Optional[Score] = None
