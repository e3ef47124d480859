"""External busyness models.

BusynessReading is what a provider hands back: two raw levels on the
provider's 0–100 scale.  ExternalBusynessSample is the client's enriched,
cacheable view of one reading.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from venue_pulse.domain.enums import BusynessTrend, RelativeLevel


class BusynessReading(BaseModel):
    """Raw provider output for one place."""

    current_level: int = Field(..., ge=0, le=100)
    usual_level: int = Field(..., ge=0, le=100)

    model_config = {"frozen": True}


class ExternalBusynessSample(BaseModel):
    """A third-party busyness estimate, as cached by the busyness client."""

    current_level: int = Field(..., ge=0, le=100)
    usual_level: int = Field(..., ge=0, le=100, description="Usual level for this hour")
    relative_level: RelativeLevel
    trend: BusynessTrend
    fetched_at: datetime
    confidence: float = Field(..., ge=0.0, le=1.0)

    model_config = {"frozen": True}
