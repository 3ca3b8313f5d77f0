"""Business logic: tag resolution, tag listing, sync passes and scheduling."""

from catapi.services.scheduler import SyncScheduler
from catapi.services.sync_engine import SyncEngine
from catapi.services.tag_listing import TagListingService
from catapi.services.tag_resolver import TagResolver

__all__ = [
    "SyncEngine",
    "SyncScheduler",
    "TagListingService",
    "TagResolver",
]
