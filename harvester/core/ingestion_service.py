"""
Persistence operations the crawl path needs, run off the event loop.
"""
import asyncio
from datetime import datetime
from typing import Callable, Dict, List, Optional

from loguru import logger

from harvester.interfaces import Category, Source
from harvester.models import Article
from harvester.storage import ArticleRepository


class IngestionService:
    """Wraps the article repository for the crawler and orchestrator."""

    def __init__(self, repository: ArticleRepository,
                 cache_invalidators: Optional[List[Callable[[], None]]] = None):
        """
        Args:
            repository: Article store
            cache_invalidators: Extra read-side caches to drop before each run
        """
        self.repository = repository
        self.cache_invalidators = list(cache_invalidators or [])

    async def prepare_run(self) -> None:
        """Run the cache invalidators and promote the previous run's NEW articles to ACTIVE."""
        await asyncio.to_thread(self._prepare_run_sync)

    def _prepare_run_sync(self) -> None:
        for invalidate in self.cache_invalidators:
            invalidate()
        promoted = self.repository.promote_new_to_active()
        logger.info(f"Prepared crawl run: {promoted} articles promoted to ACTIVE")

    async def latest_published_by_category_and_source(self) -> Dict[Source, Dict[Category, Optional[datetime]]]:
        return await asyncio.to_thread(self.repository.latest_published_per_category_source)

    async def save_batch(self, articles: List[Article]) -> int:
        """Insert articles, skipping URLs that already exist.

        Returns:
            Number of articles actually inserted
        """
        if not articles:
            return 0
        return await asyncio.to_thread(self.repository.upsert_batch, articles)
