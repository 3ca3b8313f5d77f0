"""Abstract base class for the image/tag catalog store.

The store is the source of truth for image records, tags, and the ordered
many-to-many association between them.  Image records follow a stage/commit
cycle (``add_record`` then ``commit``) so that one sync pass is persisted in
a single transaction.  Tags are different: ``add_tag`` commits immediately
so a new tag id is usable (and cacheable) straight away.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from catapi.models.cat import ImageRecord, Tag


# Concrete implementations: MemoryCatalogStore, SQLiteCatalogStore
# (catapi/providers/store/).
class ICatalogStore(ABC):
    """Contract for catalog persistence.

    Lookups return ``None`` (or an empty list) for "absent"; exceptions are
    reserved for faults and raised as ``StorageError`` subclasses.
    """

    # ── Lifecycle ──────────────────────────────────────────────────────

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables/indices if they don't exist.  Called at startup."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""

    # ── Image records ──────────────────────────────────────────────────

    @abstractmethod
    async def record_exists(self, external_id: str) -> bool:
        """Return ``True`` if a committed record has this external id."""

    @abstractmethod
    async def add_record(self, record: ImageRecord) -> None:
        """Stage *record* and its tag associations for the next commit.

        Every tag on the record must already carry a store-assigned id.
        """

    @abstractmethod
    async def commit(self) -> int:
        """Persist all staged records in one transaction.

        Returns
        -------
        int
            Number of records written.  On failure nothing is written,
            the staged records are discarded and ``StorageError`` is raised.
        """

    @abstractmethod
    async def rollback(self) -> None:
        """Discard all staged records without writing them."""

    @abstractmethod
    async def get_record(self, record_id: int) -> ImageRecord | None:
        """Return the committed record with *record_id*, tags included."""

    @abstractmethod
    async def list_records(
        self,
        page: int = 1,
        page_size: int = 10,
        tag: str | None = None,
    ) -> list[ImageRecord]:
        """List committed records ordered by id.

        Parameters
        ----------
        page:
            1-based page number.
        page_size:
            Records per page.
        tag:
            When given, only records linked to the tag with exactly this
            name are returned.
        """

    # ── Tags ───────────────────────────────────────────────────────────

    @abstractmethod
    async def get_tag(self, tag_id: int) -> Tag | None:
        """Return the tag with *tag_id*, or ``None``."""

    @abstractmethod
    async def find_tag_by_name(self, name: str) -> Tag | None:
        """Return the tag with exactly *name*, or ``None``."""

    @abstractmethod
    async def add_tag(self, tag: Tag) -> Tag:
        """Insert *tag*, assign its id, and commit immediately.

        Raises
        ------
        TagConflictError
            If a tag with the same name already exists.
        """

    @abstractmethod
    async def list_all_tags(self) -> list[Tag]:
        """Return every tag ordered by id, read fresh from the store."""
