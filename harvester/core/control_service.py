"""
Operations exposed to the web layer and the command line.
"""
import asyncio
from datetime import timedelta
from typing import Dict, Union

from loguru import logger

from harvester.core.orchestrator import CrawlOrchestrator
from harvester.core.run_controller import RunController
from harvester.core.scheduler import AutoCrawlScheduler
from harvester.interfaces import ConfigurationError, IntervalIsZeroError, Source
from harvester.models import AutoScheduleStatus, CrawlerSettings, RunStatus
from harvester.utils import format_interval, parse_interval


class CrawlControlService:
    """Start/stop runs, toggle sources and manage auto-crawl."""

    def __init__(self, orchestrator: CrawlOrchestrator, scheduler: AutoCrawlScheduler,
                 run_controller: RunController, settings: CrawlerSettings, metrics=None):
        self.orchestrator = orchestrator
        self.scheduler = scheduler
        self.run_controller = run_controller
        self.settings = settings
        self.metrics = metrics

    def start_run(self) -> asyncio.Task:
        """Launch a crawl run in the background and return immediately.

        Raises:
            RunAlreadyInProgressError: When a run is already active
        """
        task = self.orchestrator.start()
        logger.info("Crawl run accepted")
        return task

    def stop_run(self) -> None:
        """Request a cooperative stop.

        Raises:
            RunNotInProgressError: When no run is active
        """
        self.run_controller.stop()

    def run_status(self) -> RunStatus:
        last_run = self.metrics.last_run_metrics if self.metrics else None
        return RunStatus(
            in_progress=self.run_controller.in_progress,
            stop_requested=self.run_controller.stop_requested,
            last_run=last_run,
        )

    def get_source_statuses(self) -> Dict[Source, bool]:
        return self.settings.source_statuses()

    def set_source_enabled(self, statuses: Dict[Source, bool]) -> Dict[Source, bool]:
        """Update enabled flags; unknown sources are ignored.

        Takes effect from the next source the orchestrator reaches.
        """
        for source, enabled in statuses.items():
            config = self.settings.sources.get(source)
            if config is None:
                logger.warning(f"Source {source} is not configured, ignoring status change")
                continue
            config.enabled = bool(enabled)
            logger.info(f"[{source.value}] Source {'enabled' if enabled else 'disabled'}")
        return self.get_source_statuses()

    def get_auto_schedule_status(self) -> AutoScheduleStatus:
        return self.scheduler.status()

    def set_auto_schedule_interval(self, interval: Union[str, timedelta]) -> AutoScheduleStatus:
        """Change the auto-crawl interval.

        Raises:
            InvalidIntervalFormatError: For strings not in ``XdYhZm`` form
            IntervalIsZeroError: For a zero interval
            ConfigurationError: For a negative interval
        """
        if isinstance(interval, str):
            interval = parse_interval(interval)
        elif interval == timedelta(0):
            raise IntervalIsZeroError()
        elif interval < timedelta(0):
            raise ConfigurationError(f"Interval must not be negative: {interval}")

        self.settings.auto_crawl_interval = interval
        logger.info(f"Auto-crawl interval set to {format_interval(interval)}")
        self.scheduler.reschedule()
        return self.get_auto_schedule_status()

    def enable_auto_schedule(self) -> AutoScheduleStatus:
        self.scheduler.enable()
        return self.get_auto_schedule_status()

    def disable_auto_schedule(self) -> AutoScheduleStatus:
        self.scheduler.disable()
        return self.get_auto_schedule_status()
