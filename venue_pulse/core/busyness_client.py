"""ExternalBusynessClient: cached, failure-tolerant access to third-party busyness.

The client sits between the engine and an ExternalBusynessProvider.  It
checks the time-boxed cache first, calls the provider on a miss, derives
the relative level and trend from the raw reading, and caches the result.

A provider failure of any kind (missing credentials, HTTP error, timeout,
malformed payload) is reported as "no data": get_busyness() returns None
and the engine carries on without external input.
"""

from __future__ import annotations

import logging
from typing import Optional

from venue_pulse.core.cache import TimeBoxedCache
from venue_pulse.domain.busyness import BusynessReading, ExternalBusynessSample
from venue_pulse.domain.enums import BusynessTrend, RelativeLevel
from venue_pulse.domain.errors import ProviderError, ProviderUnavailable
from venue_pulse.foundation.clock import utc_now
from venue_pulse.providers.base import ExternalBusynessProvider

logger = logging.getLogger(__name__)

TREND_THRESHOLD = 10


def relative_level(current: int, usual: int) -> RelativeLevel:
    """Band the current/usual ratio.  An unknown usual level counts as average."""
    ratio = current / usual if usual > 0 else 1.0
    if ratio < 0.5:
        return RelativeLevel.LOW
    if ratio < 0.8:
        return RelativeLevel.BELOW_AVERAGE
    if ratio < 1.2:
        return RelativeLevel.AVERAGE
    if ratio < 1.5:
        return RelativeLevel.ABOVE_AVERAGE
    return RelativeLevel.HIGH


def busyness_trend(current: int, usual: int) -> BusynessTrend:
    difference = current - usual
    if difference > TREND_THRESHOLD:
        return BusynessTrend.INCREASING
    if difference < -TREND_THRESHOLD:
        return BusynessTrend.DECREASING
    return BusynessTrend.STABLE


class ExternalBusynessClient:
    """Cache-first busyness lookups keyed by the provider's place identifier.

    Args:
        provider: The transport that performs the paid upstream lookup.
        cache: Shared time-boxed cache; a private 5-minute cache by default.
    """

    def __init__(
        self,
        provider: ExternalBusynessProvider,
        cache: TimeBoxedCache[str, ExternalBusynessSample] | None = None,
    ) -> None:
        self._provider = provider
        self._cache: TimeBoxedCache[str, ExternalBusynessSample] = (
            cache if cache is not None else TimeBoxedCache()
        )

    @property
    def cache(self) -> TimeBoxedCache[str, ExternalBusynessSample]:
        return self._cache

    async def get_busyness(self, place_id: str) -> Optional[ExternalBusynessSample]:
        cached = self._cache.get(place_id)
        if cached is not None:
            logger.debug("Busyness cache hit for %s", place_id)
            return cached

        try:
            reading = await self._provider.fetch(place_id)
        except ProviderUnavailable as exc:
            logger.warning("Busyness provider unavailable: %s", exc)
            return None
        except ProviderError as exc:
            logger.warning("Busyness lookup failed for %s: %s", place_id, exc)
            return None
        except Exception:
            # Malformed payloads and transport bugs degrade the same way
            logger.exception("Unexpected busyness provider failure for %s", place_id)
            return None

        sample = self._to_sample(reading)
        self._cache.put(place_id, sample, sample.fetched_at)
        logger.debug(
            "Fetched busyness for %s: current=%d usual=%d (%s, %s)",
            place_id,
            sample.current_level,
            sample.usual_level,
            sample.relative_level.value,
            sample.trend.value,
        )
        return sample

    @staticmethod
    def _to_sample(reading: BusynessReading) -> ExternalBusynessSample:
        current, usual = reading.current_level, reading.usual_level
        return ExternalBusynessSample(
            current_level=current,
            usual_level=usual,
            relative_level=relative_level(current, usual),
            trend=busyness_trend(current, usual),
            fetched_at=utc_now(),
            confidence=0.9 if current > 0 else 0.3,
        )
