"""venue-pulse: activity scoring for venues.

This is the application entry point.  It wires the InMemoryStore,
busyness provider, PulseService, re-score worker and HTTP routes together.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo

from fastapi import FastAPI

from venue_pulse.api.pulse import create_pulse_router
from venue_pulse.config import settings
from venue_pulse.services.pulse_service import create_pulse_service
from venue_pulse.store.memory_store import InMemoryStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

# ── State ────────────────────────────────────────────────────────────────────

store = InMemoryStore(tz=ZoneInfo(settings.venue_timezone))

# ── Service ──────────────────────────────────────────────────────────────────

service = create_pulse_service(store, settings)

# ── App ──────────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    if service.rescore_queue is not None:
        service.rescore_queue.start()
    yield
    if service.rescore_queue is not None:
        await service.rescore_queue.stop()


app = FastAPI(
    title=settings.app_name,
    description="Venue activity scores fused from telemetry, community and external signals",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Routes ───────────────────────────────────────────────────────────────────

app.include_router(create_pulse_router(service))


# ── Health ───────────────────────────────────────────────────────────────────

@app.get("/health")
async def health() -> dict:
    summary = await store.summary()
    queue = service.rescore_queue
    return {
        "status": "ok",
        **summary.to_dict(),
        "busyness_cache_entries": len(service.busyness_cache) if service.busyness_cache is not None else 0,
        "rescore_pending": queue.pending_count if queue else 0,
        "rescore_worker_running": queue.running if queue else False,
    }
