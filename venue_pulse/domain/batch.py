"""Batch refresh result models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from venue_pulse.domain.enums import DataSource


class NotableVenue(BaseModel):
    """A venue whose fresh score crossed the notable threshold."""

    venue_id: int
    name: str
    value: float
    source: DataSource

    model_config = {"frozen": True}


class BatchSummary(BaseModel):
    """Counts and highlights from one update_all() run."""

    total: int = 0
    updated: int = 0
    failed: int = 0
    chunks: int = Field(0, description="Number of concurrent chunks processed")
    failed_venue_ids: list[int] = Field(default_factory=list)
    notable: list[NotableVenue] = Field(
        default_factory=list, description="Successful venues at or above the threshold, highest first"
    )

    model_config = {"frozen": True}
