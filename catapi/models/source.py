"""Wire model for images returned by the external source.

Parsing is deliberately lenient; field constraints are enforced later
when the sync engine builds an :class:`~catapi.models.cat.ImageRecord`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FetchedImage(BaseModel):
    """One image from a source batch, with one temperament string per breed."""

    model_config = ConfigDict(frozen=True)

    external_id: str = ""
    url: str = ""
    width: int = 0
    height: int = 0
    temperaments: list[str] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> FetchedImage:
        """Build from one element of TheCatAPI ``/v1/images/search`` response."""
        breeds = payload.get("breeds") or []
        temperaments = [
            breed["temperament"]
            for breed in breeds
            if isinstance(breed, dict) and breed.get("temperament")
        ]
        return cls(
            external_id=str(payload.get("id") or ""),
            url=str(payload.get("url") or ""),
            width=int(payload.get("width") or 0),
            height=int(payload.get("height") or 0),
            temperaments=temperaments,
        )
