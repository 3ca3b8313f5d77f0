"""REST API routes for catapi.

Endpoints:
    POST /api/v1/cats/fetch        -- run one synchronization pass
    GET  /api/v1/cats/{record_id}  -- one stored record with its tags
    GET  /api/v1/cats              -- paginated records, optional ?tag= filter
    GET  /api/v1/tags              -- every tag (cached listing)
    GET  /api/v1/health            -- liveness and configured backends

Application errors raised by the services propagate to
``ErrorHandlingMiddleware``; only "not found" and paging problems are
turned into ``HTTPException`` here.
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from catapi import __version__
from catapi.api.schemas import (
    CatListResponse,
    CatResponse,
    HealthResponse,
    SyncResponse,
    TagListResponse,
    TagResponse,
)
from catapi.interfaces.catalog_store import ICatalogStore
from catapi.services.sync_engine import SyncEngine
from catapi.services.tag_listing import TagListingService

logger = structlog.get_logger(logger_name=__name__)

router = APIRouter(prefix="/api/v1")

# Keeps the SQL OFFSET within SQLite's 64-bit integer range for any page size.
MAX_PAGE = 1_000_000


# ---------------------------------------------------------------------------
# Dependency helpers -- pull shared components off ``app.state``.
# ---------------------------------------------------------------------------


def _get_sync_engine(request: Request) -> SyncEngine:
    """Return the sync engine from application state."""
    return request.app.state.sync_engine


def _get_catalog_store(request: Request) -> ICatalogStore:
    """Return the catalog store from application state."""
    return request.app.state.catalog_store


def _get_tag_listing(request: Request) -> TagListingService:
    """Return the tag listing service from application state."""
    return request.app.state.tag_listing


def _get_config(request: Request) -> dict[str, Any]:
    """Return the resolved YAML + env config, or an empty dict."""
    return getattr(request.app.state, "config", None) or {}


SyncEngineDep = Annotated[SyncEngine, Depends(_get_sync_engine)]
CatalogStoreDep = Annotated[ICatalogStore, Depends(_get_catalog_store)]
TagListingDep = Annotated[TagListingService, Depends(_get_tag_listing)]
ConfigDep = Annotated[dict[str, Any], Depends(_get_config)]


# ---------------------------------------------------------------------------
# Cats
# ---------------------------------------------------------------------------


@router.post("/cats/fetch", response_model=SyncResponse)
async def fetch_cats(engine: SyncEngineDep) -> SyncResponse:
    """Pull one batch from the image source and store the new images."""
    report = await engine.synchronize()
    return SyncResponse(
        fetched=report.fetched,
        created=report.created,
        skipped=report.skipped,
    )


@router.get("/cats/{record_id}", response_model=CatResponse)
async def get_cat(record_id: int, store: CatalogStoreDep) -> CatResponse:
    record = await store.get_record(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Cat not found.")
    return CatResponse.from_record(record)


@router.get("/cats", response_model=CatListResponse)
async def list_cats(
    store: CatalogStoreDep,
    config: ConfigDep,
    page: Annotated[int, Query(ge=1, le=MAX_PAGE)] = 1,
    page_size: Annotated[int | None, Query(ge=1)] = None,
    tag: Annotated[str | None, Query(min_length=1)] = None,
) -> CatListResponse:
    """List stored records ordered by id, optionally only those with *tag*."""
    api_config = config.get("api", {})
    max_page_size = api_config.get("max_page_size", 100)
    if page_size is None:
        page_size = api_config.get("default_page_size", 10)
    if page_size > max_page_size:
        raise HTTPException(
            status_code=400,
            detail=f"page_size must not exceed {max_page_size}.",
        )

    records = await store.list_records(page=page, page_size=page_size, tag=tag)
    if not records:
        raise HTTPException(status_code=404, detail="No cats found.")

    return CatListResponse(
        page=page,
        page_size=page_size,
        tag=tag,
        items=[CatResponse.from_record(r) for r in records],
    )


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


@router.get("/tags", response_model=TagListResponse)
async def list_tags(listing: TagListingDep) -> TagListResponse:
    tags = await listing.list_all_tags()
    return TagListResponse(tags=[TagResponse.from_tag(t) for t in tags], total=len(tags))


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Report liveness and the backend behind each port."""
    providers: dict[str, str] = {}
    for port, attr in (
        ("store", "catalog_store"),
        ("cache", "cache"),
        ("source", "image_source"),
    ):
        component = getattr(request.app.state, attr, None)
        if component is not None:
            providers[port] = component.get_provider_name()
    return HealthResponse(version=__version__, providers=providers)
