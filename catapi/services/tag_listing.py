"""Cached "list all tags" read path."""

from __future__ import annotations

import structlog
from pydantic import TypeAdapter, ValidationError

from catapi.interfaces.cache_provider import ICacheProvider
from catapi.interfaces.catalog_store import ICatalogStore
from catapi.models.cat import Tag
from catapi.services.cache_keys import ALL_TAGS_CACHE_KEY, DEFAULT_TAG_TTL_SECONDS
from catapi.utils.errors import CacheError

logger = structlog.get_logger(logger_name=__name__)

_TAG_LIST_ADAPTER = TypeAdapter(list[Tag])


class TagListingService:
    """Serves the full tag list from one cached JSON blob.

    The blob is dropped by :class:`TagResolver` whenever it creates a tag,
    so a stale listing can only outlive a failed invalidation by the TTL.
    """

    def __init__(
        self,
        store: ICatalogStore,
        cache: ICacheProvider,
        ttl_seconds: int = DEFAULT_TAG_TTL_SECONDS,
    ) -> None:
        self._store = store
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    async def list_all_tags(self) -> list[Tag]:
        cached = await self._read_cache()
        if cached is not None:
            return cached

        tags = await self._store.list_all_tags()
        try:
            await self._cache.set(
                ALL_TAGS_CACHE_KEY,
                _TAG_LIST_ADAPTER.dump_json(tags),
                ttl=self._ttl_seconds,
            )
        except CacheError as exc:
            logger.warning("cache_write_failed", key=ALL_TAGS_CACHE_KEY, error=str(exc))
        return tags

    async def _read_cache(self) -> list[Tag] | None:
        try:
            payload = await self._cache.get(ALL_TAGS_CACHE_KEY)
        except CacheError as exc:
            logger.warning("cache_read_failed", key=ALL_TAGS_CACHE_KEY, error=str(exc))
            return None
        if payload is None:
            return None
        try:
            return _TAG_LIST_ADAPTER.validate_json(payload)
        except ValidationError:
            logger.warning("cache_entry_undecodable", key=ALL_TAGS_CACHE_KEY)
            return None
