"""Result model for one synchronization pass."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SyncReport(BaseModel):
    """Counts for a completed sync pass."""

    model_config = ConfigDict(frozen=True)

    fetched: int = Field(default=0, ge=0, description="Images returned by the source.")
    created: int = Field(default=0, ge=0, description="New records committed.")
    skipped: int = Field(default=0, ge=0, description="Images already known or repeated in the batch.")
