"""
Small in-memory TTL cache for expensive read-only aggregates.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached item with expiration."""
    data: Any
    expires_at: datetime


class TTLCache:
    """
    Key/value cache whose entries expire after a fixed number of seconds.

    The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(self, ttl_seconds: int, clock: Optional[Callable[[], datetime]] = None):
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or datetime.utcnow
        self._entries: Dict[str, CacheEntry] = {}

    def _is_expired(self, entry: Optional[CacheEntry]) -> bool:
        if entry is None:
            return True
        return self._clock() >= entry.expires_at

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if self._is_expired(entry):
            return None
        return entry.data

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = CacheEntry(data=data, expires_at=self._clock() + self.ttl)

    def get_or_set(self, key: str, factory: Callable[[], Any]) -> Any:
        """Return the cached value, computing and storing it when missing or stale."""
        entry = self._entries.get(key)
        if not self._is_expired(entry):
            return entry.data

        data = factory()
        self.set(key, data)
        logger.info(f"Cached {key} for {self.ttl.total_seconds():.0f} seconds")
        return data

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one key, or everything when no key is given."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)
