"""catapi FastAPI application entry point.

Wires providers and services together, loads configuration from ``.env``
and ``config/config.yaml``, configures structured logging, and starts the
optional sync scheduler with the application lifespan.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from catapi import __version__
from catapi.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from catapi.api.routes import router as api_router
from catapi.config.loader import load_config
from catapi.config.settings import Settings
from catapi.interfaces.cache_provider import ICacheProvider
from catapi.providers.cache.memory_cache import MemoryCacheProvider
from catapi.providers.cache.redis_cache import RedisCacheProvider
from catapi.providers.source.cat_api_provider import CatApiImageSource
from catapi.providers.store.sqlite_store import SQLiteCatalogStore
from catapi.services.scheduler import SyncScheduler
from catapi.services.sync_engine import SyncEngine
from catapi.services.tag_listing import TagListingService
from catapi.services.tag_resolver import TagResolver
from catapi.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component factories
# ---------------------------------------------------------------------------


def _build_cache(app_settings: Settings) -> ICacheProvider:
    """Redis when ``REDIS_URL`` is set, otherwise an in-process cache."""
    if app_settings.redis_url:
        return RedisCacheProvider(
            redis_url=app_settings.redis_url,
            key_prefix=app_settings.scoped_cache_prefix(),
        )
    return MemoryCacheProvider(max_size=app_settings.cache_max_entries)


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    http_client = httpx.AsyncClient(timeout=app_settings.cat_api_timeout_seconds)

    cache = _build_cache(app_settings)
    catalog_store = SQLiteCatalogStore(db_path=app_settings.database_path)
    image_source = CatApiImageSource(
        http_client=http_client,
        base_url=app_settings.cat_api_base_url,
        api_key=app_settings.cat_api_key,
        batch_limit=app_settings.cat_api_batch_limit,
    )

    tag_resolver = TagResolver(
        store=catalog_store,
        cache=cache,
        ttl_seconds=app_settings.tag_cache_ttl_seconds,
    )
    tag_listing = TagListingService(
        store=catalog_store,
        cache=cache,
        ttl_seconds=app_settings.tag_cache_ttl_seconds,
    )
    sync_engine = SyncEngine(
        source=image_source,
        store=catalog_store,
        tag_resolver=tag_resolver,
    )
    scheduler = SyncScheduler(
        engine=sync_engine,
        interval_seconds=app_settings.sync_interval_seconds,
    )

    return {
        "http_client": http_client,
        "cache": cache,
        "catalog_store": catalog_store,
        "image_source": image_source,
        "tag_resolver": tag_resolver,
        "tag_listing": tag_listing,
        "sync_engine": sync_engine,
        "scheduler": scheduler,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise stores and the scheduler on startup, release them on shutdown."""
    components = getattr(application.state, "components", None) or _build_all(settings)
    components.setdefault("config", config)

    for key, value in components.items():
        setattr(application.state, key, value)

    catalog_store = components.get("catalog_store")
    if catalog_store is not None:
        await catalog_store.initialize()

    cache = components.get("cache")
    if cache is not None:
        await cache.initialize()

    scheduler: SyncScheduler | None = components.get("scheduler")
    if scheduler is not None:
        scheduler.start()

    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        store=catalog_store.get_provider_name() if catalog_store else None,
        cache=cache.get_provider_name() if cache else None,
    )

    yield

    if scheduler is not None:
        scheduler.stop()
    if cache is not None:
        await cache.close()
    http_client: httpx.AsyncClient | None = components.get("http_client")
    if http_client is not None:
        await http_client.aclose()
    _logger.info("app_shutdown")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(components: dict[str, Any] | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    components:
        Pre-built components (as returned by :func:`_build_all`).  When
        omitted the lifespan builds them from the environment settings.
    """
    application = FastAPI(
        title="catapi",
        version=__version__,
        description=(
            "Sync cat images from TheCatAPI into a local catalog, tag them by "
            "breed temperament, and browse them by page or tag."
        ),
        lifespan=_lifespan,
    )

    if components is not None:
        application.state.components = dict(components)

    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=config.get("api", {}).get("cors_origins"))

    application.include_router(api_router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "catapi.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
