"""catapi domain models.

    - cat.py     -- ImageRecord and Tag (catalog entities)
    - source.py  -- FetchedImage (external source wire model)
    - sync.py    -- SyncReport (per-pass counts)
"""

from __future__ import annotations

from catapi.models.cat import TAG_NAME_MAX_LENGTH, ImageRecord, Tag
from catapi.models.source import FetchedImage
from catapi.models.sync import SyncReport

__all__ = [
    "FetchedImage",
    "ImageRecord",
    "SyncReport",
    "TAG_NAME_MAX_LENGTH",
    "Tag",
]
