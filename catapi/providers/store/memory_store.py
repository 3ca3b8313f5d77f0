"""In-memory catalog store.

Reference implementation of :class:`ICatalogStore` used by tests and by
``python -m catapi.cli`` when no database is wanted.  It mirrors the SQLite
store's semantics: tag names are unique, ``add_tag`` is immediately
visible, and staged records are written all-or-nothing on ``commit``.
"""

from __future__ import annotations

import structlog

from catapi.interfaces.catalog_store import ICatalogStore
from catapi.models.cat import ImageRecord, Tag
from catapi.utils.errors import StorageError, TagConflictError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "memory_store"


class MemoryCatalogStore(ICatalogStore):
    """Dict-backed catalog with autoincrement ids."""

    def __init__(self) -> None:
        self._tags: dict[int, Tag] = {}
        self._tag_ids_by_name: dict[str, int] = {}
        self._records: dict[int, ImageRecord] = {}
        self._record_ids_by_external: dict[str, int] = {}
        self._pending: list[ImageRecord] = []
        self._next_tag_id = 1
        self._next_record_id = 1

    async def initialize(self) -> None:
        logger.info("memory_store_initialized")

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    # ── Image records ──────────────────────────────────────────────────

    async def record_exists(self, external_id: str) -> bool:
        return external_id in self._record_ids_by_external

    async def add_record(self, record: ImageRecord) -> None:
        self._pending.append(record)

    async def commit(self) -> int:
        pending, self._pending = self._pending, []
        self._check_pending(pending)

        for record in pending:
            record_id = self._next_record_id
            self._next_record_id += 1
            self._records[record_id] = record.model_copy(update={"id": record_id})
            self._record_ids_by_external[record.external_id] = record_id

        if pending:
            logger.info("records_committed", count=len(pending))
        return len(pending)

    async def rollback(self) -> None:
        if self._pending:
            logger.info("records_rolled_back", count=len(self._pending))
        self._pending = []

    async def get_record(self, record_id: int) -> ImageRecord | None:
        return self._records.get(record_id)

    async def list_records(
        self,
        page: int = 1,
        page_size: int = 10,
        tag: str | None = None,
    ) -> list[ImageRecord]:
        records = [self._records[key] for key in sorted(self._records)]
        if tag is not None:
            records = [r for r in records if tag in r.tag_names]
        offset = (page - 1) * page_size
        return records[offset:offset + page_size]

    # ── Tags ───────────────────────────────────────────────────────────

    async def get_tag(self, tag_id: int) -> Tag | None:
        return self._tags.get(tag_id)

    async def find_tag_by_name(self, name: str) -> Tag | None:
        tag_id = self._tag_ids_by_name.get(name)
        if tag_id is None:
            return None
        return self._tags[tag_id]

    async def add_tag(self, tag: Tag) -> Tag:
        if tag.name in self._tag_ids_by_name:
            raise TagConflictError(
                message=f"Tag {tag.name!r} already exists",
                provider_name=_PROVIDER_NAME,
            )
        stored = tag.model_copy(update={"id": self._next_tag_id})
        self._next_tag_id += 1
        self._tags[stored.id] = stored
        self._tag_ids_by_name[stored.name] = stored.id
        return stored

    async def list_all_tags(self) -> list[Tag]:
        return [self._tags[key] for key in sorted(self._tags)]

    # ── Helpers ────────────────────────────────────────────────────────

    def _check_pending(self, pending: list[ImageRecord]) -> None:
        """Raise ``StorageError`` if any staged record would violate a constraint."""
        external_ids: set[str] = set()
        for record in pending:
            if record.external_id in self._record_ids_by_external or record.external_id in external_ids:
                raise StorageError(
                    message=f"Duplicate external id {record.external_id!r}",
                    provider_name=_PROVIDER_NAME,
                )
            external_ids.add(record.external_id)
            for tag in record.tags:
                if tag.id is None or tag.id not in self._tags:
                    raise StorageError(
                        message=f"Record {record.external_id!r} references unknown tag {tag.name!r}",
                        provider_name=_PROVIDER_NAME,
                    )
