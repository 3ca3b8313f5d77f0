"""Unit tests for the component factories and create_app in catapi/main.py."""

from __future__ import annotations

from fastapi import FastAPI

from catapi.config.settings import Settings
from catapi.main import _build_all, _build_cache, create_app
from catapi.providers.cache.memory_cache import MemoryCacheProvider
from catapi.providers.cache.redis_cache import RedisCacheProvider
from catapi.providers.store.sqlite_store import SQLiteCatalogStore
from catapi.services.scheduler import SyncScheduler
from catapi.services.sync_engine import SyncEngine


def _settings(**overrides) -> Settings:
    defaults = {
        "cat_api_key": "",
        "redis_url": "",
        "database_path": "data/test.db",
        "sync_interval_seconds": 0,
        "app_env": "test",
    }
    defaults.update(overrides)
    return Settings(**defaults)


class TestBuildCache:
    def test_memory_without_redis_url(self) -> None:
        assert isinstance(_build_cache(_settings()), MemoryCacheProvider)

    def test_redis_with_url(self) -> None:
        settings = _settings(redis_url="redis://localhost:6379/0")
        cache = _build_cache(settings)
        assert isinstance(cache, RedisCacheProvider)
        assert cache._full_key("tag:Calm") == f"{settings.scoped_cache_prefix()}tag:Calm"


class TestBuildAll:
    def test_components_present(self) -> None:
        components = _build_all(_settings())
        assert set(components) >= {
            "http_client",
            "cache",
            "catalog_store",
            "image_source",
            "tag_resolver",
            "tag_listing",
            "sync_engine",
            "scheduler",
        }
        assert isinstance(components["catalog_store"], SQLiteCatalogStore)
        assert isinstance(components["sync_engine"], SyncEngine)
        assert isinstance(components["scheduler"], SyncScheduler)
        assert components["scheduler"].enabled is False

    def test_scheduler_enabled_by_interval(self) -> None:
        components = _build_all(_settings(sync_interval_seconds=300))
        assert components["scheduler"].enabled is True


class TestCreateApp:
    def test_returns_fastapi_with_routes(self) -> None:
        app = create_app(components={})
        assert isinstance(app, FastAPI)
        paths = {route.path for route in app.routes}
        assert {
            "/api/v1/cats/fetch",
            "/api/v1/cats/{record_id}",
            "/api/v1/cats",
            "/api/v1/tags",
            "/api/v1/health",
        } <= paths
