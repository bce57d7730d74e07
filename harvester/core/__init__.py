"""
Crawl engine: fetching, cursors, run state, persistence and orchestration.
"""
from .run_controller import RunController
from .cursor_store import CursorStore, create_redis_client
from .page_fetcher import PageFetcher
from .ingestion_service import IngestionService
from .source_crawler import SourceCrawler
from .orchestrator import CrawlOrchestrator
from .scheduler import AutoCrawlScheduler
from .control_service import CrawlControlService

__all__ = [
    'RunController',
    'CursorStore',
    'create_redis_client',
    'PageFetcher',
    'IngestionService',
    'SourceCrawler',
    'CrawlOrchestrator',
    'AutoCrawlScheduler',
    'CrawlControlService'
]
