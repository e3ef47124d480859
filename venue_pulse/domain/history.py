"""Append-only records written after scores are computed."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from venue_pulse.domain.enums import DataSource
from venue_pulse.foundation.clock import utc_now


class ScoreHistoryEntry(BaseModel):
    """One persisted score, kept for trend charts."""

    entry_id: UUID = Field(default_factory=uuid4)
    venue_id: int
    value: float
    confidence: float
    data_sources: list[DataSource]
    recorded_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": True}


class CalculationRecord(BaseModel):
    """Audit row for a rich-telemetry calculation: the score and its inputs."""

    record_id: UUID = Field(default_factory=uuid4)
    venue_id: int
    calculated_value: float
    factors: dict[str, Any] = Field(default_factory=dict)
    recorded_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": True}
