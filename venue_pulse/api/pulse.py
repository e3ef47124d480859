"""REST endpoints for venue scores and community input.

Paths:
    GET  /api/venues/{id}/pulse            current computed score
    POST /api/venues/{id}/pulse/refresh    compute, persist, record history
    POST /api/pulse/refresh                batch refresh of all active venues
    POST /api/venues/{id}/reports          submit a vibe report (429 if rate-limited)
    POST /api/venues/{id}/pings            submit an anonymous ping
    GET  /api/venues/{id}/consensus        community consensus + influence
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from venue_pulse.domain.errors import RateLimited, StoreUnavailable, VenueNotFound
from venue_pulse.models.requests import PingRequest, VibeReportRequest
from venue_pulse.services.pulse_service import PulseService

logger = logging.getLogger(__name__)


def create_pulse_router(service: PulseService) -> APIRouter:
    """Factory that wires the pulse endpoints to a concrete PulseService."""

    router = APIRouter(prefix="/api", tags=["pulse"])

    @router.get("/venues/{venue_id}/pulse")
    async def get_pulse(venue_id: int) -> dict[str, Any]:
        try:
            score = await service.calculate(venue_id)
        except VenueNotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except StoreUnavailable as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return {"venue_id": venue_id, **score.model_dump(mode="json")}

    @router.post("/venues/{venue_id}/pulse/refresh")
    async def refresh_pulse(venue_id: int) -> dict[str, Any]:
        try:
            score = await service.update_venue(venue_id)
        except VenueNotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except StoreUnavailable as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return {"venue_id": venue_id, **score.model_dump(mode="json")}

    @router.post("/pulse/refresh")
    async def refresh_all() -> dict[str, Any]:
        summary = await service.update_all()
        return summary.model_dump(mode="json")

    @router.post("/venues/{venue_id}/reports", status_code=201)
    async def submit_report(venue_id: int, body: VibeReportRequest) -> dict[str, Any]:
        try:
            stored = await service.submit_vibe_report(body.to_report(venue_id))
        except VenueNotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except RateLimited as exc:
            raise HTTPException(status_code=429, detail=str(exc)) from exc
        return {
            "status": "accepted",
            "venue_id": venue_id,
            "vibe_level": stored.vibe_level.value,
            "created_at": stored.created_at.isoformat(),
        }

    @router.post("/venues/{venue_id}/pings", status_code=202)
    async def submit_ping(venue_id: int, body: PingRequest) -> dict[str, Any]:
        admitted = await service.submit_ping(body.to_ping(venue_id))
        return {"status": "accepted" if admitted else "ignored", "venue_id": venue_id}

    @router.get("/venues/{venue_id}/consensus")
    async def get_consensus(
        venue_id: int,
        window_minutes: int | None = Query(None, ge=1, le=24 * 60),
    ) -> dict[str, Any]:
        consensus = await service.get_community_consensus(venue_id, window_minutes)
        influence = service.aggregator.influence(consensus)
        return {
            "venue_id": venue_id,
            "consensus": consensus.model_dump(mode="json"),
            "influence": influence.model_dump(mode="json"),
        }

    return router
