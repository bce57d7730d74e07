"""
Fixed-delay auto-crawl scheduling.

The delay is measured from the end of one run to the start of the next.
The first run is triggered as soon as the schedule is enabled.
"""
import asyncio
from datetime import datetime, timedelta
from typing import Optional

from loguru import logger

from harvester.core.orchestrator import CrawlOrchestrator
from harvester.interfaces import RunAlreadyInProgressError
from harvester.models import AutoScheduleStatus, CrawlerSettings
from harvester.utils import format_interval


class AutoCrawlScheduler:
    """Owns the optional recurring crawl task."""

    def __init__(self, orchestrator: CrawlOrchestrator, settings: CrawlerSettings):
        self.orchestrator = orchestrator
        self.settings = settings
        self._task: Optional[asyncio.Task] = None
        self._interval_changed = asyncio.Event()
        self.next_run_at: Optional[datetime] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def enable(self) -> bool:
        """Schedule recurring runs with the configured interval.

        Must be called from a running event loop.

        Returns:
            True if the schedule is active afterwards
        """
        if self.active:
            return True

        interval = self.settings.auto_crawl_interval
        if interval is None or interval <= timedelta(0):
            logger.warning(f"Auto-crawl interval is not set or <= 0 ({interval}), could not enable the feature")
            return False

        self._task = asyncio.create_task(self._loop(), name="auto-crawl")
        self.settings.auto_crawl_enabled = True
        logger.info(f"Auto-crawl every {format_interval(interval)} is enabled")
        return True

    def disable(self) -> None:
        """Cancel the pending schedule. A run already in flight is left alone."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.info("Auto-crawl is disabled")
        self.next_run_at = None
        self.settings.auto_crawl_enabled = False

    def reschedule(self) -> None:
        """Apply a changed interval to an active schedule.

        A run in flight keeps its place and the new delay counts from its end.
        A pending delay is recomputed from the end of the previous run.
        """
        if self.active:
            self._interval_changed.set()
            logger.info(f"Auto-crawl interval changed to {format_interval(self.settings.auto_crawl_interval)}")

    def status(self) -> AutoScheduleStatus:
        interval = self.settings.auto_crawl_interval
        return AutoScheduleStatus(
            enabled=self.settings.auto_crawl_enabled,
            interval=format_interval(interval) if interval else None,
            next_run_at=self.next_run_at if self.active else None,
        )

    async def _loop(self) -> None:
        while True:
            await self.trigger()
            await self._wait_after(datetime.now())

    async def _wait_after(self, finished_at: datetime) -> None:
        """Sleep until one interval past ``finished_at``, re-reading the interval on change."""
        while True:
            self._interval_changed.clear()
            self.next_run_at = finished_at + self.settings.auto_crawl_interval
            delay = (self.next_run_at - datetime.now()).total_seconds()
            if delay <= 0:
                return
            try:
                await asyncio.wait_for(self._interval_changed.wait(), delay)
            except asyncio.TimeoutError:
                return

    async def trigger(self) -> None:
        """Start one run and wait for it, tolerating an overlapping manual run."""
        try:
            task = self.orchestrator.start()
        except RunAlreadyInProgressError as e:
            logger.warning(e.message)
            return

        try:
            # Disabling the schedule must not cancel the run itself
            await asyncio.shield(task)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"Auto-crawl run failed: {e}")
