"""APScheduler-based periodic synchronization."""

from __future__ import annotations

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from catapi.models.sync import SyncReport
from catapi.services.sync_engine import SyncEngine
from catapi.utils.errors import CatApiError

logger = structlog.get_logger(logger_name=__name__)

_JOB_ID = "catapi_sync"


class SyncScheduler:
    """Runs :meth:`SyncEngine.synchronize` every ``interval_seconds``.

    An interval of 0 disables scheduling; ``start`` then does nothing.
    A failed pass is logged and the next one still runs on time.
    """

    def __init__(self, engine: SyncEngine, interval_seconds: int = 0) -> None:
        self._engine = engine
        self._interval_seconds = interval_seconds
        self._scheduler = AsyncIOScheduler()

    @property
    def enabled(self) -> bool:
        return self._interval_seconds > 0

    @property
    def running(self) -> bool:
        return self._scheduler.running

    async def run_once(self) -> SyncReport | None:
        """Run one scheduled pass; returns ``None`` when the pass failed."""
        logger.info("scheduled_sync_started")
        try:
            report = await self._engine.synchronize()
        except CatApiError as exc:
            logger.error("scheduled_sync_failed", error=str(exc))
            return None
        logger.info("scheduled_sync_completed", created=report.created, skipped=report.skipped)
        return report

    def start(self) -> None:
        """Register the job and start the scheduler.  Needs a running event loop."""
        if not self.enabled:
            logger.info("sync_scheduler_disabled")
            return

        self._scheduler.add_job(
            self.run_once,
            IntervalTrigger(seconds=self._interval_seconds),
            id=_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info("sync_scheduler_started", interval_seconds=self._interval_seconds)

    def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("sync_scheduler_stopped")
