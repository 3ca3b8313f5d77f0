"""One synchronization pass: source batch -> tagged, committed image records.

# ─── PASS OUTLINE ────────────────────────────────────────────────────
#
#   fetch_batch()                      SourceError aborts, nothing staged
#   for each image:
#       skip if external id known      (store or earlier in this batch)
#       validate -> ImageRecord         RecordValidationError aborts
#       resolve_tags(temperaments)     tags commit on their own
#       add_record()                   staged only
#   commit()                           one transaction for all records
#
# Any exception after fetching, cancellation included, rolls back the
# staged records and is re-raised, so a failed pass leaves no partial
# records behind.  Tags created before the failure stay; they are valid
# on their own.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from pydantic import ValidationError

from catapi.interfaces.catalog_store import ICatalogStore
from catapi.interfaces.image_source import IImageSource
from catapi.models.cat import ImageRecord
from catapi.models.source import FetchedImage
from catapi.models.sync import SyncReport
from catapi.services.tag_resolver import TagResolver
from catapi.utils.errors import RecordValidationError

logger = structlog.get_logger(logger_name=__name__)


class SyncEngine:
    """Runs synchronization passes one at a time.

    Concurrent callers of :meth:`synchronize` queue on an internal lock.
    """

    def __init__(
        self,
        source: IImageSource,
        store: ICatalogStore,
        tag_resolver: TagResolver,
    ) -> None:
        self._source = source
        self._store = store
        self._tag_resolver = tag_resolver
        self._lock = asyncio.Lock()

    async def synchronize(self) -> SyncReport:
        """Fetch one batch and persist every image not seen before.

        Running it again over an unchanged batch creates nothing.
        """
        async with self._lock:
            images = await self._source.fetch_batch()
            logger.info(
                "sync_started",
                source=self._source.get_provider_name(),
                fetched=len(images),
            )
            try:
                created, skipped = await self._stage(images)
                committed = await self._store.commit()
            except BaseException as exc:
                # Includes cancellation: nothing staged may leak into the next pass.
                await self._store.rollback()
                logger.error("sync_failed", error_type=type(exc).__name__, error=str(exc))
                raise

        report = SyncReport(fetched=len(images), created=committed, skipped=skipped)
        logger.info(
            "sync_complete",
            fetched=report.fetched,
            created=report.created,
            skipped=report.skipped,
            staged=created,
        )
        return report

    async def _stage(self, images: list[FetchedImage]) -> tuple[int, int]:
        seen: set[str] = set()
        created = skipped = 0
        for image in images:
            if image.external_id in seen or await self._store.record_exists(image.external_id):
                logger.debug("image_skipped", external_id=image.external_id)
                skipped += 1
                continue
            seen.add(image.external_id)

            fields = _record_fields(image)
            _validate(fields)
            tags = await self._tag_resolver.resolve_tags(image.temperaments)
            await self._store.add_record(_validate({**fields, "tags": tags}))
            created += 1
        return created, skipped


def _record_fields(image: FetchedImage) -> dict[str, Any]:
    return {
        "external_id": image.external_id,
        "url": image.url,
        "width": image.width,
        "height": image.height,
    }


def _validate(fields: dict[str, Any]) -> ImageRecord:
    try:
        return ImageRecord.model_validate(fields)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise RecordValidationError(
            message=f"Image {fields.get('external_id')!r} is invalid: {problems}"
        ) from exc
