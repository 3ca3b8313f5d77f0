"""Request/response schemas for the catapi HTTP API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from catapi.models.cat import ImageRecord, Tag


class TagResponse(BaseModel):
    """One tag as returned by ``GET /api/v1/tags``."""

    id: int
    name: str
    created_at: datetime

    @classmethod
    def from_tag(cls, tag: Tag) -> TagResponse:
        return cls(id=tag.id, name=tag.name, created_at=tag.created_at)


class TagListResponse(BaseModel):
    tags: list[TagResponse] = Field(default_factory=list)
    total: int = 0


class CatResponse(BaseModel):
    """One stored image record with its tag names in association order."""

    id: int
    external_id: str
    url: str
    width: int
    height: int
    created_at: datetime
    tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: ImageRecord) -> CatResponse:
        return cls(
            id=record.id,
            external_id=record.external_id,
            url=record.url,
            width=record.width,
            height=record.height,
            created_at=record.created_at,
            tags=record.tag_names,
        )


class CatListResponse(BaseModel):
    page: int
    page_size: int
    tag: str | None = None
    items: list[CatResponse] = Field(default_factory=list)


class SyncResponse(BaseModel):
    """Result of ``POST /api/v1/cats/fetch``."""

    message: str = "Cats fetched and stored successfully."
    fetched: int
    created: int
    skipped: int


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    providers: dict[str, str] = Field(
        default_factory=dict,
        description="Configured backend per port, e.g. {'store': 'sqlite'}.",
    )


class ErrorResponse(BaseModel):
    """Body returned for application errors."""

    error: str
    detail: str | None = None
