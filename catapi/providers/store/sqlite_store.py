"""SQLite-backed catalog store.

Persists image records, tags and their ordered association to a local
SQLite database (``data/catapi.db`` by default) using ``aiosqlite``.

Schema::

    tags        (id, name UNIQUE, created_at)
    images      (id, external_id UNIQUE, width, height, url, created_at)
    image_tags  (image_id, tag_id, position, PRIMARY KEY(image_id, tag_id))

Each operation opens its own connection.  Staged records live in memory
until ``commit`` writes them in a single transaction.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

import aiosqlite
import structlog

from catapi.interfaces.catalog_store import ICatalogStore
from catapi.models.cat import ImageRecord, Tag
from catapi.utils.errors import StorageError, TagConflictError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "sqlite"
_DEFAULT_DB_PATH = Path("data/catapi.db")

_CREATE_TABLES_SQL = [
    """\
CREATE TABLE IF NOT EXISTS tags (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT    NOT NULL UNIQUE,
    created_at  TEXT    NOT NULL
);
""",
    """\
CREATE TABLE IF NOT EXISTS images (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    external_id  TEXT    NOT NULL UNIQUE,
    width        INTEGER NOT NULL CHECK (width > 0),
    height       INTEGER NOT NULL CHECK (height > 0),
    url          TEXT    NOT NULL,
    created_at   TEXT    NOT NULL
);
""",
    """\
CREATE TABLE IF NOT EXISTS image_tags (
    image_id  INTEGER NOT NULL REFERENCES images(id),
    tag_id    INTEGER NOT NULL REFERENCES tags(id),
    position  INTEGER NOT NULL,
    PRIMARY KEY (image_id, tag_id)
);
""",
]

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_image_tags_tag ON image_tags(tag_id);",
]

_INSERT_TAG_SQL = "INSERT INTO tags (name, created_at) VALUES (?, ?);"

_SELECT_TAG_BY_ID_SQL = "SELECT id, name, created_at FROM tags WHERE id = ?;"

_SELECT_TAG_BY_NAME_SQL = "SELECT id, name, created_at FROM tags WHERE name = ?;"

_SELECT_ALL_TAGS_SQL = "SELECT id, name, created_at FROM tags ORDER BY id;"

_INSERT_IMAGE_SQL = """\
INSERT INTO images (external_id, width, height, url, created_at)
VALUES (?, ?, ?, ?, ?);
"""

_INSERT_IMAGE_TAG_SQL = "INSERT INTO image_tags (image_id, tag_id, position) VALUES (?, ?, ?);"

_SELECT_IMAGE_EXISTS_SQL = "SELECT 1 FROM images WHERE external_id = ? LIMIT 1;"

_SELECT_IMAGE_SQL = """\
SELECT id, external_id, width, height, url, created_at
FROM images WHERE id = ?;
"""

_SELECT_IMAGES_PAGE_SQL = """\
SELECT id, external_id, width, height, url, created_at
FROM images ORDER BY id LIMIT ? OFFSET ?;
"""

_SELECT_IMAGES_BY_TAG_PAGE_SQL = """\
SELECT i.id, i.external_id, i.width, i.height, i.url, i.created_at
FROM images i
JOIN image_tags it ON it.image_id = i.id
JOIN tags t ON t.id = it.tag_id
WHERE t.name = ?
ORDER BY i.id LIMIT ? OFFSET ?;
"""

_SELECT_TAGS_FOR_IMAGES_SQL = """\
SELECT it.image_id, t.id, t.name, t.created_at
FROM image_tags it
JOIN tags t ON t.id = it.tag_id
WHERE it.image_id IN ({placeholders})
ORDER BY it.image_id, it.position;
"""


class SQLiteCatalogStore(ICatalogStore):
    """SQLite-backed catalog persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)
        self._pending: list[ImageRecord] = []

    async def initialize(self) -> None:
        """Create tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with self._connect() as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            for table_sql in _CREATE_TABLES_SQL:
                await db.execute(table_sql)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("catalog_db_initialized", path=str(self._db_path))

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    # ── Image records ──────────────────────────────────────────────────

    async def record_exists(self, external_id: str) -> bool:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_IMAGE_EXISTS_SQL, (external_id,))
            row = await cursor.fetchone()
        return row is not None

    async def add_record(self, record: ImageRecord) -> None:
        self._pending.append(record)

    async def commit(self) -> int:
        pending, self._pending = self._pending, []
        if not pending:
            return 0

        async with self._connect() as db:
            try:
                for record in pending:
                    cursor = await db.execute(
                        _INSERT_IMAGE_SQL,
                        (
                            record.external_id,
                            record.width,
                            record.height,
                            record.url,
                            record.created_at.isoformat(),
                        ),
                    )
                    image_id = cursor.lastrowid
                    for position, tag in enumerate(record.tags):
                        await db.execute(_INSERT_IMAGE_TAG_SQL, (image_id, tag.id, position))
                await db.commit()
            except aiosqlite.Error:
                await db.rollback()
                raise

        logger.info("records_committed", count=len(pending))
        return len(pending)

    async def rollback(self) -> None:
        if self._pending:
            logger.info("records_rolled_back", count=len(self._pending))
        self._pending = []

    async def get_record(self, record_id: int) -> ImageRecord | None:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_IMAGE_SQL, (record_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            records = await self._attach_tags(db, [row])
        return records[0]

    async def list_records(
        self,
        page: int = 1,
        page_size: int = 10,
        tag: str | None = None,
    ) -> list[ImageRecord]:
        offset = (page - 1) * page_size
        async with self._connect() as db:
            if tag is None:
                cursor = await db.execute(_SELECT_IMAGES_PAGE_SQL, (page_size, offset))
            else:
                cursor = await db.execute(
                    _SELECT_IMAGES_BY_TAG_PAGE_SQL, (tag, page_size, offset)
                )
            rows = await cursor.fetchall()
            return await self._attach_tags(db, rows)

    # ── Tags ───────────────────────────────────────────────────────────

    async def get_tag(self, tag_id: int) -> Tag | None:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_TAG_BY_ID_SQL, (tag_id,))
            row = await cursor.fetchone()
        return _row_to_tag(row) if row is not None else None

    async def find_tag_by_name(self, name: str) -> Tag | None:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_TAG_BY_NAME_SQL, (name,))
            row = await cursor.fetchone()
        return _row_to_tag(row) if row is not None else None

    async def add_tag(self, tag: Tag) -> Tag:
        async with self._connect() as db:
            try:
                cursor = await db.execute(
                    _INSERT_TAG_SQL, (tag.name, tag.created_at.isoformat())
                )
                await db.commit()
            except aiosqlite.IntegrityError as exc:
                raise TagConflictError(
                    message=f"Tag {tag.name!r} already exists",
                    provider_name=_PROVIDER_NAME,
                ) from exc
        logger.debug("tag_inserted", name=tag.name, tag_id=cursor.lastrowid)
        return tag.model_copy(update={"id": cursor.lastrowid})

    async def list_all_tags(self) -> list[Tag]:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_ALL_TAGS_SQL)
            rows = await cursor.fetchall()
        return [_row_to_tag(row) for row in rows]

    # ── Helpers ────────────────────────────────────────────────────────

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection with row access by name and FK enforcement.

        Driver errors surface as ``StorageError``.
        """
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                await db.execute("PRAGMA foreign_keys=ON;")
                yield db
        except aiosqlite.Error as exc:
            raise StorageError(message=str(exc), provider_name=_PROVIDER_NAME) from exc

    async def _attach_tags(
        self,
        db: aiosqlite.Connection,
        rows: list[aiosqlite.Row],
    ) -> list[ImageRecord]:
        if not rows:
            return []
        image_ids = [row["id"] for row in rows]
        sql = _SELECT_TAGS_FOR_IMAGES_SQL.format(
            placeholders=", ".join("?" for _ in image_ids)
        )
        cursor = await db.execute(sql, image_ids)
        tag_rows = await cursor.fetchall()

        tags_by_image: dict[int, list[Tag]] = {image_id: [] for image_id in image_ids}
        for tag_row in tag_rows:
            tags_by_image[tag_row["image_id"]].append(_row_to_tag(tag_row))

        return [
            ImageRecord(
                id=row["id"],
                external_id=row["external_id"],
                width=row["width"],
                height=row["height"],
                url=row["url"],
                created_at=datetime.fromisoformat(row["created_at"]),
                tags=tags_by_image[row["id"]],
            )
            for row in rows
        ]


def _row_to_tag(row: aiosqlite.Row) -> Tag:
    return Tag(
        id=row["id"],
        name=row["name"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )
