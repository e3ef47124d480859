"""Domain exceptions.

Only VenueNotFound and RateLimited ever reach callers of the public API.
Provider failures are absorbed by the busyness client; store failures are
absorbed per venue by the batch coordinator.
"""

from __future__ import annotations


class PulseError(Exception):
    """Base class for all venue-pulse errors."""


class VenueNotFound(PulseError):
    """Raised when a venue id does not resolve in the store."""

    def __init__(self, venue_id: int) -> None:
        self.venue_id = venue_id
        super().__init__(f"Venue {venue_id} not found")


class RateLimited(PulseError):
    """Raised when a participant reports the same venue twice inside the window."""

    def __init__(self, venue_id: int, participant_id: str) -> None:
        self.venue_id = venue_id
        self.participant_id = participant_id
        super().__init__("You already reported this venue recently")


class ProviderError(PulseError):
    """The external busyness provider failed or returned an unusable payload."""


class ProviderUnavailable(ProviderError):
    """The external busyness provider cannot be called (e.g. no credentials)."""


class StoreUnavailable(PulseError):
    """The backing store could not serve a read or write."""
