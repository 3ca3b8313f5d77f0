"""Redis cache provider using ``redis.asyncio``.

Used when ``REDIS_URL`` is configured, so several API workers share one
tag cache.  Every key is namespaced with ``key_prefix``.  Backend errors
are raised as :class:`CacheError`; the services above decide how to
degrade.
"""

from __future__ import annotations

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from catapi.interfaces.cache_provider import ICacheProvider
from catapi.utils.errors import CacheError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "redis"


class RedisCacheProvider(ICacheProvider):
    """Byte-valued cache stored in Redis with native per-key expiry.

    Parameters
    ----------
    redis_url:
        Connection URL, e.g. ``redis://localhost:6379/0``.
    key_prefix:
        Prepended to every key, e.g. ``"catapi:"``.
    client:
        Pre-built client; when omitted one is created from *redis_url*.
    """

    def __init__(
        self,
        redis_url: str,
        key_prefix: str = "",
        client: redis.Redis | None = None,
    ) -> None:
        self._redis_url = redis_url
        self._key_prefix = key_prefix
        self._client = client or redis.Redis.from_url(redis_url)

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    async def initialize(self) -> None:
        """Ping the server; an unreachable Redis is logged, not fatal."""
        try:
            await self._client.ping()
        except RedisError as exc:
            logger.warning(
                "redis_unavailable_at_startup",
                url=self._sanitize_url(self._redis_url),
                error=str(exc),
            )
            return
        logger.info("redis_cache_initialized", url=self._sanitize_url(self._redis_url))

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> bytes | None:
        try:
            value = await self._client.get(self._full_key(key))
        except RedisError as exc:
            raise CacheError(
                message=f"GET {key} failed: {exc}", provider_name=_PROVIDER_NAME
            ) from exc
        logger.debug("cache_hit" if value is not None else "cache_miss", key=key)
        return value

    async def set(self, key: str, value: bytes, ttl: int | None = None) -> None:
        try:
            await self._client.set(self._full_key(key), value, ex=ttl)
        except RedisError as exc:
            raise CacheError(
                message=f"SET {key} failed: {exc}", provider_name=_PROVIDER_NAME
            ) from exc
        logger.debug("cache_set", key=key, ttl=ttl)

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._full_key(key))
        except RedisError as exc:
            raise CacheError(
                message=f"DEL {key} failed: {exc}", provider_name=_PROVIDER_NAME
            ) from exc
        logger.debug("cache_delete", key=key)

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._client.exists(self._full_key(key)))
        except RedisError as exc:
            raise CacheError(
                message=f"EXISTS {key} failed: {exc}", provider_name=_PROVIDER_NAME
            ) from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _full_key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    @staticmethod
    def _sanitize_url(url: str) -> str:
        """Remove credentials from a Redis URL for logging."""
        if "@" in url:
            scheme, _, rest = url.partition("://")
            return f"{scheme}://***@{rest.rsplit('@', 1)[-1]}"
        return url
