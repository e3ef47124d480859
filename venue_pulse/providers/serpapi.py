"""SerpApiBusynessProvider: live busyness from Google Maps via SerpAPI.

Request:
    GET {base_url}?engine=google_maps&type=place&data_id=<place_id>&api_key=<key>

Relevant response shape:
{
    "place_results": {
        "title": "The Rusty Anchor",
        "current_popularity": 64,
        "populartimes": [
            {"day": "Friday", "data": [5, 0, 0, ..., 71, 80, 66]},
            ...
        ]
    }
}

current_popularity is absent when Google has no live reading; that maps
to 0.  The usual level is today's entry at the current local hour, and
defaults to 50 when the histogram is missing or reads zero.
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any

import httpx

from venue_pulse.domain.busyness import BusynessReading
from venue_pulse.domain.errors import ProviderError, ProviderUnavailable
from venue_pulse.foundation.clock import utc_now
from venue_pulse.providers.base import ExternalBusynessProvider

logger = logging.getLogger(__name__)

DEFAULT_USUAL_LEVEL = 50


class SerpApiBusynessProvider(ExternalBusynessProvider):
    """Maps SerpAPI Google Maps place results to BusynessReadings.

    Args:
        api_key: SerpAPI key.  An empty key makes every fetch raise
            ProviderUnavailable.
        base_url: Search endpoint.
        timeout: Seconds before the HTTP call is abandoned.
        tz: Timezone used to pick today's popular-times entry.
        client: Optional shared AsyncClient; one is created per call otherwise.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://serpapi.com/search.json",
        timeout: float = 10.0,
        tz: tzinfo | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._tz = tz
        self._client = client

    @property
    def provider_name(self) -> str:
        return "serpapi"

    async def fetch(self, place_id: str) -> BusynessReading:
        if not self._api_key:
            raise ProviderUnavailable("No SerpAPI key configured")

        params = {
            "engine": "google_maps",
            "type": "place",
            "data_id": place_id,
            "api_key": self._api_key,
        }

        try:
            if self._client is not None:
                response = await self._client.get(self._base_url, params=params, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(self._base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise ProviderError(f"SerpAPI request failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(f"SerpAPI returned invalid JSON: {exc}") from exc

        return self._parse(data)

    # ── Parsing ──────────────────────────────────────────────────────────

    def _parse(self, data: Any) -> BusynessReading:
        if not isinstance(data, dict):
            raise ProviderError("SerpAPI payload is not an object")
        if data.get("error"):
            raise ProviderError(f"SerpAPI error: {data['error']}")

        place = data.get("place_results")
        if not isinstance(place, dict):
            raise ProviderError("SerpAPI payload has no place_results")

        current = _as_level(place.get("current_popularity")) or 0
        usual = self._usual_level(place.get("populartimes"))

        logger.debug(
            "SerpAPI place %r: current=%d usual=%d",
            place.get("title"), current, usual,
        )
        return BusynessReading(current_level=current, usual_level=usual)

    def _usual_level(self, popular_times: Any) -> int:
        if not isinstance(popular_times, list):
            return DEFAULT_USUAL_LEVEL

        now = utc_now().astimezone(self._tz) if self._tz else utc_now()
        today = now.strftime("%A")

        for day in popular_times:
            if not isinstance(day, dict) or day.get("day") != today:
                continue
            hourly = day.get("data")
            if isinstance(hourly, list) and len(hourly) > now.hour:
                return _as_level(hourly[now.hour]) or DEFAULT_USUAL_LEVEL
            break

        return DEFAULT_USUAL_LEVEL


def _as_level(raw: Any) -> int | None:
    """Coerce a provider number into the 0–100 range; None if not numeric."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    return max(0, min(100, int(raw)))
