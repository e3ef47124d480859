"""Time-boxed cache: entries expire a fixed interval after they were fetched.

Design notes:
    - get() returns None for both missing and expired keys; callers never
      see stale data.
    - put() is a last-writer-wins overwrite.  Concurrent misses for the
      same key may both fetch upstream and both write; entries are
      independently keyed, so no lock is taken.
    - There is no size-based eviction.  Expired entries are dropped when
      read, or in bulk via purge_expired().
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Generic, Hashable, Optional, TypeVar

from venue_pulse.foundation.clock import utc_now

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class CacheEntry(Generic[V]):
    __slots__ = ("value", "fetched_at")

    def __init__(self, value: V, fetched_at: datetime) -> None:
        self.value = value
        self.fetched_at = fetched_at


class TimeBoxedCache(Generic[K, V]):
    """In-memory cache whose entries live for *ttl* after their fetch time."""

    def __init__(self, ttl: timedelta = timedelta(minutes=5)) -> None:
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self._ttl = ttl
        self._entries: dict[K, CacheEntry[V]] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get(self, key: K) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry, utc_now()):
            self._entries.pop(key, None)
            return None
        return entry.value

    def put(self, key: K, value: V, fetched_at: datetime | None = None) -> None:
        self._entries[key] = CacheEntry(value, fetched_at or utc_now())

    def invalidate(self, key: K) -> None:
        self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = utc_now()
        expired = [k for k, e in self._entries.items() if self._is_expired(e, now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Purged %d expired cache entr(ies)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry[V], now: datetime) -> bool:
        return now - entry.fetched_at > self._ttl
