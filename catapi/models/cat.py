"""Catalog domain models: image records and temperament tags.

Both models are frozen.  A ``Tag`` is the value cached under ``tag:<name>``
and returned by the listing endpoint; an ``ImageRecord`` owns an ordered,
duplicate-free list of tags built once at construction time.
"""

from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

TAG_NAME_MAX_LENGTH = 50


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)  # noqa: UP017


class Tag(BaseModel):
    """A canonical temperament tag.

    ``id`` is ``None`` until the store assigns one.  Names are unique
    across the store and compared case-sensitively.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, description="Store-assigned identity.")
    name: str = Field(
        min_length=1,
        max_length=TAG_NAME_MAX_LENGTH,
        description="Trimmed temperament token, e.g. 'Playful'.",
    )
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


class ImageRecord(BaseModel):
    """One cat image ingested from the external source.

    Never mutated after creation; ``id`` stays ``None`` until the store
    commits the record.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, description="Store-assigned identity.")
    external_id: str = Field(min_length=1, description="Image id reported by the source.")
    width: int = Field(gt=0, description="Width in pixels.")
    height: int = Field(gt=0, description="Height in pixels.")
    url: str = Field(min_length=1, description="Absolute http(s) URL of the image.")
    created_at: datetime = Field(default_factory=_utcnow)
    tags: list[Tag] = Field(default_factory=list)

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"not an absolute http(s) URL: {value!r}")
        return value

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[Tag]) -> list[Tag]:
        # Ordered set semantics: first occurrence of each name wins.
        seen: set[str] = set()
        unique: list[Tag] = []
        for tag in value:
            if tag.name in seen:
                continue
            seen.add(tag.name)
            unique.append(tag)
        return unique

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]
