#!/usr/bin/env python3
"""
In-memory cache of parsed feeds.

Provides:
- Configurable TTL (time-to-live), measured from fetch completion
- Thread-safe access, fetches run on a worker pool
- Expiry housekeeping and stats
"""

import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from models import RawFeedItem


DEFAULT_TTL_MINUTES = 5


class FeedCache:
    """URL-keyed cache of parsed feed items with TTL support."""

    def __init__(self, ttl_minutes: float = DEFAULT_TTL_MINUTES,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize the cache.

        Args:
            ttl_minutes: Time-to-live for cached feeds in minutes
            clock: Monotonic clock in seconds, replaceable in tests
        """
        self.ttl_seconds = ttl_minutes * 60
        self._clock = clock
        self._entries: Dict[str, Tuple[float, List[RawFeedItem]]] = {}
        self._lock = threading.Lock()

    def _now(self) -> float:
        return self._clock()

    def _is_fresh(self, stored_at: float) -> bool:
        return (self._now() - stored_at) < self.ttl_seconds

    def get(self, url: str) -> Optional[List[RawFeedItem]]:
        """
        Retrieve cached items if not expired.

        Returns:
            Cached item list or None if not found/expired
        """
        with self._lock:
            entry = self._entries.get(url)
            if entry is None:
                return None

            stored_at, items = entry
            if not self._is_fresh(stored_at):
                del self._entries[url]
                return None

            return list(items)

    def set(self, url: str, items: List[RawFeedItem]):
        """Store items for a URL, stamped with the current time."""
        with self._lock:
            self._entries[url] = (self._now(), list(items))

    def clear_expired(self) -> int:
        """Remove all expired entries and return how many were dropped."""
        with self._lock:
            expired = [url for url, (stored_at, _) in self._entries.items()
                       if not self._is_fresh(stored_at)]
            for url in expired:
                del self._entries[url]
        return len(expired)

    def clear_all(self):
        """Clear all cache data."""
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = len(self._entries)
            expired = sum(1 for stored_at, _ in self._entries.values()
                          if not self._is_fresh(stored_at))

        return {
            "cache_entries": total,
            "expired_entries": expired,
            "valid_entries": total - expired,
            "ttl_seconds": self.ttl_seconds,
        }
