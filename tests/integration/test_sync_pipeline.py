"""End-to-end sync passes against SQLite with the in-memory cache.

No HTTP layer: this exercises SyncEngine, TagResolver and
TagListingService together over a real database file.
"""

from __future__ import annotations

import pytest

from catapi.models.cat import Tag
from catapi.providers.cache.memory_cache import MemoryCacheProvider
from catapi.providers.store.sqlite_store import SQLiteCatalogStore
from catapi.services.sync_engine import SyncEngine
from catapi.services.tag_listing import TagListingService
from catapi.services.tag_resolver import TagResolver
from catapi.utils.errors import RecordValidationError
from tests.conftest import make_image, make_source


class TestSyncPipeline:
    @pytest.mark.asyncio
    async def test_two_breeds_scenario(self, sqlite_store: SQLiteCatalogStore) -> None:
        cache = MemoryCacheProvider()
        source = make_source([
            make_image("A", "Playful, Friendly"),
            make_image("B", "Calm, Independent"),
        ])
        engine = SyncEngine(source, sqlite_store, TagResolver(sqlite_store, cache))
        listing = TagListingService(sqlite_store, cache)

        report = await engine.synchronize()

        assert report.created == 2
        records = {r.external_id: r for r in await sqlite_store.list_records()}
        assert records["A"].tag_names == ["Playful", "Friendly"]
        assert records["B"].tag_names == ["Calm", "Independent"]
        tags = await listing.list_all_tags()
        assert sorted(t.name for t in tags) == ["Calm", "Friendly", "Independent", "Playful"]

    @pytest.mark.asyncio
    async def test_tag_names_unique_across_passes(self, sqlite_store: SQLiteCatalogStore) -> None:
        source = make_source(
            [make_image("A", "Playful, Friendly")],
            [make_image("B", "Friendly, Curious"), make_image("C", "Curious")],
        )
        engine = SyncEngine(source, sqlite_store, TagResolver(sqlite_store, MemoryCacheProvider()))

        await engine.synchronize()
        await engine.synchronize()

        names = [t.name for t in await sqlite_store.list_all_tags()]
        assert names == ["Playful", "Friendly", "Curious"]
        by_tag = await sqlite_store.list_records(tag="Curious")
        assert [r.external_id for r in by_tag] == ["B", "C"]

    @pytest.mark.asyncio
    async def test_cold_cache_reuses_existing_rows(self, sqlite_store: SQLiteCatalogStore) -> None:
        first = SyncEngine(
            make_source([make_image("A", "Calm")]),
            sqlite_store,
            TagResolver(sqlite_store, MemoryCacheProvider()),
        )
        second = SyncEngine(
            make_source([make_image("B", "Calm")]),
            sqlite_store,
            TagResolver(sqlite_store, MemoryCacheProvider()),
        )

        await first.synchronize()
        await second.synchronize()

        [calm] = await sqlite_store.list_all_tags()
        records = await sqlite_store.list_records()
        assert [r.tags[0].id for r in records] == [calm.id, calm.id]

    @pytest.mark.asyncio
    async def test_failed_pass_leaves_no_records(self, sqlite_store: SQLiteCatalogStore) -> None:
        source = make_source([make_image("A", "Calm"), make_image("B", "Shy", url="")])
        engine = SyncEngine(source, sqlite_store, TagResolver(sqlite_store, MemoryCacheProvider()))

        with pytest.raises(RecordValidationError):
            await engine.synchronize()

        assert await sqlite_store.list_records() == []
        assert await sqlite_store.record_exists("A") is False

    @pytest.mark.asyncio
    async def test_shared_cache_across_databases(self, tmp_path) -> None:
        cache = MemoryCacheProvider()
        main_db = SQLiteCatalogStore(db_path=tmp_path / "main.db")
        other_db = SQLiteCatalogStore(db_path=tmp_path / "other.db")
        await main_db.initialize()
        await other_db.initialize()
        await main_db.add_tag(Tag(name="Shy"))

        await SyncEngine(
            make_source([make_image("A", "Calm")]), main_db, TagResolver(main_db, cache)
        ).synchronize()
        report = await SyncEngine(
            make_source([make_image("B", "Calm")]), other_db, TagResolver(other_db, cache)
        ).synchronize()

        assert report.created == 1
        [calm] = await other_db.list_all_tags()
        [record] = await other_db.list_records()
        assert record.tags == [calm]
