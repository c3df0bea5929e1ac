"""
In-Memory Cache with TTL
Process-lifetime cache for FFF API responses.
"""
import time
import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class CacheEntry:
    """
    Cache entry with timestamp and TTL.

    Attributes:
        key: Cache key
        value: Cached data
        stored_at: Clock reading when the entry was written
        ttl_seconds: Time-to-live in seconds
    """

    def __init__(self, key: str, value: Any, stored_at: float, ttl_seconds: float):
        self.key = key
        self.value = value
        self.stored_at = stored_at
        self.ttl_seconds = ttl_seconds

    def is_expired(self, now: float) -> bool:
        """An entry is visible only while its age is strictly below the TTL."""
        return now - self.stored_at >= self.ttl_seconds


class InMemoryCache:
    """
    Simple in-memory cache with TTL support.

    Expired entries are removed lazily on access; there is no size bound.
    One instance is shared by every accessor of a process, so callers see
    the same entries.
    """

    DEFAULT_TTL_SECONDS = 5 * 60  # 5 minutes

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize in-memory cache.

        Args:
            ttl_seconds: Default time-to-live for entries (default: 300s)
            clock: Monotonic clock, injectable for tests
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: Dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        entry = self._cache.get(key)
        return entry is not None and not entry.is_expired(self._clock())

    async def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache if not expired.

        Args:
            key: Cache key

        Returns:
            Cached value if exists and not expired, None otherwise
        """
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                # Remove expired entry
                del self._cache[key]
                logger.debug(f"Cache entry expired: {key}")
                return None
            return entry.value

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        """
        Set value in cache, overwriting any previous entry.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: Optional TTL override for this entry
        """
        async with self._lock:
            self._cache[key] = CacheEntry(
                key,
                value,
                self._clock(),
                self.ttl_seconds if ttl_seconds is None else ttl_seconds,
            )

    async def clear(self, key: Optional[str] = None) -> None:
        """
        Clear cache entry or all entries.

        Args:
            key: Optional cache key to clear. If None, clears all cache.
        """
        async with self._lock:
            if key:
                self._cache.pop(key, None)
                logger.info(f"Cleared cache entry: {key}")
            else:
                self._cache.clear()
                logger.info("Cleared all cache entries")

    async def get_or_set(
        self,
        key: str,
        value_factory: Callable[[], Awaitable[Any]],
        ttl_seconds: Optional[float] = None,
    ) -> Any:
        """
        Get value from cache, or set it using factory function if not found.

        Args:
            key: Cache key
            value_factory: Async function that returns the value to cache
            ttl_seconds: Optional TTL override

        Returns:
            Cached or newly computed value
        """
        cached = await self.get(key)
        if cached is not None:
            return cached

        value = await value_factory()
        await self.set(key, value, ttl_seconds)
        return value
