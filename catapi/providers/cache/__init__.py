"""Cache providers.

MemoryCacheProvider keeps entries in process memory with per-entry TTL;
it is not shared across workers.  RedisCacheProvider is used when
``REDIS_URL`` is set so every worker sees the same tag cache.
"""

from catapi.providers.cache.memory_cache import MemoryCacheProvider
from catapi.providers.cache.redis_cache import RedisCacheProvider

__all__ = ["MemoryCacheProvider", "RedisCacheProvider"]
