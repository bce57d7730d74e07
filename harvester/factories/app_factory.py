# harvester/factories/app_factory.py
"""
Builds the harvester object graph from settings.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

import redis
from loguru import logger
from sqlalchemy.engine import Engine

from harvester.core import (
    AutoCrawlScheduler, CrawlControlService, CrawlOrchestrator, CursorStore,
    IngestionService, PageFetcher, RunController, SourceCrawler, create_redis_client
)
from harvester.factories.extractor_factory import ExtractorFactory
from harvester.interfaces import HarvesterError
from harvester.models import CrawlerSettings
from harvester.storage import ArticleRepository, create_engine_from_env
from monitoring.metrics import CrawlMetrics


@dataclass
class HarvesterApp:
    """Everything a process needs to crawl, wired together."""
    settings: CrawlerSettings
    repository: ArticleRepository
    cursor_store: CursorStore
    run_controller: RunController
    fetcher: PageFetcher
    ingestion: IngestionService
    orchestrator: CrawlOrchestrator
    scheduler: AutoCrawlScheduler
    control: CrawlControlService
    metrics: CrawlMetrics
    parse_executor: ThreadPoolExecutor
    crawlers: List[SourceCrawler] = field(default_factory=list)

    async def close(self) -> None:
        """Stop scheduling and release network and worker resources."""
        self.scheduler.disable()
        await self.fetcher.close()
        self.parse_executor.shutdown(wait=False)


def build_application(settings: CrawlerSettings,
                      engine: Optional[Engine] = None,
                      redis_client: Optional[redis.Redis] = None,
                      metrics: Optional[CrawlMetrics] = None) -> HarvesterApp:
    """
    Wire repositories, services and one crawler per configured source.

    Args:
        settings: Loaded crawler settings
        engine: SQLAlchemy engine; built from ``DATABASE_URL`` when omitted
        redis_client: Redis client; built from ``REDIS_*`` when omitted
        metrics: Metrics collector; a fresh one when omitted
    """
    engine = engine if engine is not None else create_engine_from_env()
    redis_client = redis_client if redis_client is not None else create_redis_client()
    metrics = metrics or CrawlMetrics()

    repository = ArticleRepository(engine)
    repository.create_schema()

    run_controller = RunController()
    cursor_store = CursorStore(redis_client)
    parse_executor = ThreadPoolExecutor(max_workers=settings.parse_workers,
                                        thread_name_prefix="harvester-parse")
    fetcher = PageFetcher(
        run_controller,
        max_concurrent_requests=settings.max_concurrent_requests,
        timeout_seconds=settings.request_timeout_seconds,
        parse_executor=parse_executor,
    )
    ingestion = IngestionService(repository)

    crawlers = []
    for source, config in settings.sources.items():
        try:
            extractor = ExtractorFactory.create_extractor(source)
        except HarvesterError as e:
            logger.error(f"Skipping source {source.value}: {e}")
            continue
        crawlers.append(SourceCrawler(
            extractor, config, fetcher, cursor_store, ingestion, run_controller,
            parse_executor=parse_executor, metrics=metrics,
        ))

    orchestrator = CrawlOrchestrator(crawlers, ingestion, settings, run_controller, metrics)
    scheduler = AutoCrawlScheduler(orchestrator, settings)
    control = CrawlControlService(orchestrator, scheduler, run_controller, settings, metrics)

    logger.info(f"Harvester wired with {len(crawlers)} source crawlers")
    return HarvesterApp(
        settings=settings,
        repository=repository,
        cursor_store=cursor_store,
        run_controller=run_controller,
        fetcher=fetcher,
        ingestion=ingestion,
        orchestrator=orchestrator,
        scheduler=scheduler,
        control=control,
        metrics=metrics,
        parse_executor=parse_executor,
        crawlers=crawlers,
    )
