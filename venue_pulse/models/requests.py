"""Pydantic request bodies for the HTTP API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from venue_pulse.domain.community import AnonymousPing, CommunityReport
from venue_pulse.domain.enums import CrowdEstimate, VibeLevel


class VibeReportRequest(BaseModel):
    """A participant's report about the venue in the URL."""

    participant_id: str = Field(..., min_length=1, max_length=256)
    vibe_level: VibeLevel
    wait_minutes: Optional[int] = Field(None, ge=0, le=180)
    crowd_estimate: Optional[CrowdEstimate] = None

    def to_report(self, venue_id: int) -> CommunityReport:
        return CommunityReport(
            venue_id=venue_id,
            participant_id=self.participant_id,
            vibe_level=self.vibe_level,
            wait_minutes=self.wait_minutes,
            crowd_estimate=self.crowd_estimate,
        )


class PingRequest(BaseModel):
    """An anonymous "I'm here" ping."""

    device_id: str = Field(..., min_length=1, max_length=256)

    def to_ping(self, venue_id: int) -> AnonymousPing:
        return AnonymousPing(venue_id=venue_id, device_id=self.device_id)
