"""
Sequences all source crawlers for one crawl run.
"""
import asyncio
from typing import List, Optional, Set

from loguru import logger

from harvester.core.ingestion_service import IngestionService
from harvester.core.run_controller import RunController
from harvester.core.source_crawler import SourceCrawler
from harvester.interfaces import RunAlreadyInProgressError
from harvester.models import CrawlerSettings


class CrawlOrchestrator:
    """Runs every enabled source crawler, one source at a time."""

    def __init__(self, crawlers: List[SourceCrawler], ingestion: IngestionService,
                 settings: CrawlerSettings, run_controller: RunController, metrics=None):
        """Initialize the orchestrator.

        Args:
            crawlers: One crawler per configured source, in crawl order
            ingestion: Article persistence
            settings: Live settings, read for per-source enabled flags
            run_controller: Shared run state
            metrics: Optional run metrics collector
        """
        self.crawlers = crawlers
        self.ingestion = ingestion
        self.settings = settings
        self.run_controller = run_controller
        self.metrics = metrics
        self._tasks: Set[asyncio.Task] = set()
        self.current_task: Optional[asyncio.Task] = None

    def start(self) -> asyncio.Task:
        """Claim the run and launch it in the background.

        The caller gets the task back immediately; the run finishes on its own.

        Raises:
            RunAlreadyInProgressError: When another run holds the claim
        """
        if not self.run_controller.try_start():
            raise RunAlreadyInProgressError()

        coro = self.run()
        try:
            task = asyncio.create_task(coro, name="crawl-run")
        except BaseException:
            # Without a task nothing would ever release the claim
            coro.close()
            self.run_controller.finish_run()
            raise

        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self.current_task = task
        return task

    async def run(self) -> None:
        """Body of one crawl run. Expects the run to be claimed already."""
        status = "completed"
        if self.metrics:
            self.metrics.start_run()
        logger.info("Crawl run started")

        try:
            if self.run_controller.stop_requested:
                status = "stopped"
                return

            await self.ingestion.prepare_run()
            latest = await self.ingestion.latest_published_by_category_and_source()

            for crawler in self.crawlers:
                if self.run_controller.stop_requested:
                    break

                source = crawler.source
                if not self.settings.is_source_enabled(source):
                    logger.info(f"[{source.value}] Source disabled, skipping")
                    continue

                try:
                    await crawler.run(latest.get(source, {}))
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.exception(f"[{source.value}] Source crawl failed: {e}")
                    if self.metrics:
                        self.metrics.record_error(source.value, str(e))

            if self.run_controller.stop_requested:
                status = "stopped"
        except asyncio.CancelledError:
            status = "stopped"
            raise
        except Exception as e:
            status = "failed"
            logger.exception(f"Crawl run failed: {e}")
        finally:
            if self.metrics:
                self.metrics.end_run(status)
            self.run_controller.finish_run()
            logger.info(f"Crawl run {status}")
