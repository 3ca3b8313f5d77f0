"""Tag reconciliation: raw temperament strings -> canonical Tag entities.

# ─── RESOLUTION ORDER ────────────────────────────────────────────────
#
# For each distinct token in one ``resolve_tags`` call:
#
#   1. read-through cache  ``tag:<name>``   (hit -> re-read by id; a row
#                                           that is gone or renamed evicts
#                                           the entry and falls through)
#   2. store lookup by name                (found -> cache it)
#   3. create via ``add_tag``              (commits immediately, cache it,
#                                           drop the ``tags:all`` blob)
#      - TagConflictError: another writer won the race; re-read its row.
#
# Repeated tokens within the call reuse the Tag resolved the first time,
# so the output keeps one entry per token (duplicates included) and
# duplicates are the very same object.
#
# The cache is never authoritative.  Every CacheError is logged and the
# resolver carries on against the store.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from pydantic import ValidationError

from catapi.interfaces.cache_provider import ICacheProvider
from catapi.interfaces.catalog_store import ICatalogStore
from catapi.models.cat import Tag
from catapi.services.cache_keys import (
    ALL_TAGS_CACHE_KEY,
    DEFAULT_TAG_TTL_SECONDS,
    tag_cache_key,
)
from catapi.utils.errors import (
    CacheError,
    RecordValidationError,
    StorageError,
    TagConflictError,
)
from catapi.utils.text_normalizer import iter_temperament_tokens

logger = structlog.get_logger(logger_name=__name__)


class TagResolver:
    """Resolves temperament tokens to stored tags, creating missing ones once.

    Parameters
    ----------
    store:
        Source of truth for tags.
    cache:
        Read-through cache for individual tags.
    ttl_seconds:
        Expiry applied to every tag cache entry.
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

    async def resolve_tags(self, raw_temperaments: Sequence[str]) -> list[Tag]:
        """Return one Tag per token, in the order tokens appear.

        Raises
        ------
        RecordValidationError
            If a token is too long to be a tag name.
        StorageError
            If the store fails.
        """
        resolved: dict[str, Tag] = {}
        tags: list[Tag] = []
        for token in iter_temperament_tokens(raw_temperaments):
            tag = resolved.get(token)
            if tag is None:
                tag = await self._resolve_one(token)
                resolved[token] = tag
            tags.append(tag)
        return tags

    # ── Internals ──────────────────────────────────────────────────────

    async def _resolve_one(self, name: str) -> Tag:
        cached = await self._read_cache(name)
        if cached is not None:
            tag = await self._confirm_cached(cached)
            if tag is not None:
                return tag

        tag = await self._store.find_tag_by_name(name)
        if tag is None:
            tag = await self._create(name)
        await self._write_cache(tag)
        return tag

    async def _create(self, name: str) -> Tag:
        try:
            candidate = Tag(name=name)
        except ValidationError as exc:
            raise RecordValidationError(
                message=f"Invalid tag name {name!r}: {exc.errors()[0]['msg']}"
            ) from exc

        try:
            tag = await self._store.add_tag(candidate)
        except TagConflictError:
            logger.info("tag_create_conflict", name=name)
            tag = await self._store.find_tag_by_name(name)
            if tag is None:
                raise StorageError(
                    message=f"Tag {name!r} reported as existing but cannot be read back",
                    provider_name=self._store.get_provider_name(),
                ) from None
            return tag

        logger.info("tag_created", name=tag.name, tag_id=tag.id)
        await self._invalidate_listing()
        return tag

    async def _read_cache(self, name: str) -> Tag | None:
        try:
            payload = await self._cache.get(tag_cache_key(name))
        except CacheError as exc:
            logger.warning("cache_read_failed", name=name, error=str(exc))
            return None
        if payload is None:
            return None
        try:
            return Tag.model_validate_json(payload)
        except ValidationError:
            logger.warning("cache_entry_undecodable", key=tag_cache_key(name))
            return None

    async def _confirm_cached(self, cached: Tag) -> Tag | None:
        """Re-read a cached tag by id; evict the entry if the store disagrees.

        A shared cache can hold ids from another catalog database.
        """
        stored = await self._store.get_tag(cached.id) if cached.id is not None else None
        if stored is not None and stored.name == cached.name:
            return stored

        logger.warning("cache_entry_stale", name=cached.name, tag_id=cached.id)
        try:
            await self._cache.delete(tag_cache_key(cached.name))
        except CacheError as exc:
            logger.warning("cache_invalidate_failed", key=tag_cache_key(cached.name), error=str(exc))
        return None

    async def _write_cache(self, tag: Tag) -> None:
        try:
            await self._cache.set(
                tag_cache_key(tag.name),
                tag.model_dump_json().encode("utf-8"),
                ttl=self._ttl_seconds,
            )
        except CacheError as exc:
            logger.warning("cache_write_failed", name=tag.name, error=str(exc))

    async def _invalidate_listing(self) -> None:
        try:
            await self._cache.delete(ALL_TAGS_CACHE_KEY)
        except CacheError as exc:
            logger.warning("cache_invalidate_failed", key=ALL_TAGS_CACHE_KEY, error=str(exc))
