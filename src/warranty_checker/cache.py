"""In-memory TTL cache for resolved warranty records.

This module provides a process-local cache so repeated lookups of the same
serial number within the TTL never hit the vendor again.
"""

import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Optional

from warranty_checker.models import CacheEntry, WarrantyRecord


def _utcnow() -> datetime:
    return datetime.now(UTC)


class WarrantyCache:
    """TTL cache mapping serial numbers to warranty records.

    Expired entries are treated as absent and evicted lazily on read; there
    is no background sweep and no size bound. All operations hold a lock, so
    the cache can be shared by concurrent lookups. Concurrent writes to the
    same key resolve as last-write-wins.

    Attributes:
        ttl_seconds: Default lifetime of an entry (default: 3600).
    """

    DEFAULT_TTL_SECONDS = 3600

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the warranty cache.

        Args:
            ttl_seconds: Default number of seconds before entries expire.
            clock: Callable returning the current aware datetime. Defaults
                to ``datetime.now(UTC)``.
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock or _utcnow
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, serial: str) -> Optional[WarrantyRecord]:
        """Retrieve a cached record.

        Args:
            serial: Normalized serial number.

        Returns:
            The cached WarrantyRecord, or None on a miss or expired entry.
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(serial)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._entries[serial]
                return None
            return entry.value

    def set(
        self,
        serial: str,
        record: WarrantyRecord,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        """Store a record in the cache.

        Args:
            serial: Normalized serial number.
            record: Record to cache.
            ttl_seconds: Optional per-entry TTL overriding the default.
        """
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        expires_at = self._clock() + timedelta(seconds=ttl)
        with self._lock:
            self._entries[serial] = CacheEntry(
                key=serial, value=record, expires_at=expires_at
            )

    def clear(self, serial: Optional[str] = None) -> None:
        """Clear cache entries.

        Args:
            serial: If specified, clear only this serial. If None, clear all.
        """
        with self._lock:
            if serial is None:
                self._entries.clear()
            else:
                self._entries.pop(serial, None)

    def info(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache information:
                - count: Number of stored entries (including unevicted expired ones)
                - live: Number of entries that have not expired
                - ttl_seconds: Default entry lifetime
        """
        now = self._clock()
        with self._lock:
            count = len(self._entries)
            live = sum(1 for entry in self._entries.values() if not entry.is_expired(now))
        return {"count": count, "live": live, "ttl_seconds": self.ttl_seconds}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
