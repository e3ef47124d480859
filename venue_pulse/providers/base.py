"""Abstract base for external busyness providers.

A provider performs the (usually paid) upstream lookup of how busy a
place is right now and how busy it usually is at this hour.

Architectural rules:
    1. fetch() must return a BusynessReading or raise ProviderError.
    2. Missing credentials raise ProviderUnavailable, a ProviderError.
    3. Providers never cache; caching belongs to ExternalBusynessClient.
    4. No scoring logic lives inside a provider; only field mapping.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from venue_pulse.domain.busyness import BusynessReading


class ExternalBusynessProvider(ABC):
    """Base class for third-party busyness transports."""

    @abstractmethod
    async def fetch(self, place_id: str) -> BusynessReading:
        """Look up the live and usual busyness for *place_id*.

        Raises:
            ProviderUnavailable: If the provider cannot be called at all.
            ProviderError: If the call fails or the payload is unusable.
        """
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Human-readable name of the upstream service."""
        ...
