"""In-memory cache provider using cachetools.TLRUCache.

Suitable for development and single-process deployments.  Unlike a plain
``TTLCache`` every entry carries its own time-to-live, so the tag entries
and the all-tags blob can expire independently.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from typing import NamedTuple

import structlog
from cachetools import TLRUCache

from catapi.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class _CacheEntry(NamedTuple):
    payload: bytes
    ttl: int | None


def _time_to_use(_key: str, entry: _CacheEntry, now: float) -> float:
    if entry.ttl is None:
        return math.inf
    return now + entry.ttl


class MemoryCacheProvider(ICacheProvider):
    """In-memory per-entry TTL cache backed by ``cachetools.TLRUCache``.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used entry
        is evicted.
    timer:
        Monotonic clock in seconds; injectable for tests.
    """

    def __init__(
        self,
        max_size: int = 1000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: TLRUCache[str, _CacheEntry] = TLRUCache(
            maxsize=max_size, ttu=_time_to_use, timer=timer
        )

    def get_provider_name(self) -> str:
        return "memory"

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> bytes | None:
        """Retrieve the cached bytes for *key*, or ``None`` if missing/expired."""
        entry = self._cache.get(key)
        if entry is None:
            logger.debug("cache_miss", key=key)
            return None
        logger.debug("cache_hit", key=key)
        return entry.payload

    async def set(self, key: str, value: bytes, ttl: int | None = None) -> None:
        self._cache[key] = _CacheEntry(payload=value, ttl=ttl)
        logger.debug("cache_set", key=key, ttl=ttl)

    async def delete(self, key: str) -> None:
        """Remove *key* from the cache (no-op if absent)."""
        self._cache.pop(key, None)
        logger.debug("cache_delete", key=key)

    async def exists(self, key: str) -> bool:
        return key in self._cache
