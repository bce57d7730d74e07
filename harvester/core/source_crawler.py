"""
Page walk for a single news source.

For every configured (category, path) the crawler runs two phases:

* backlog: resume from the stored cursor (or the first listing page) and
  walk deeper into the archive, moving the cursor forward after each page
  that produced new articles;
* freshness: walk from the first listing page again, keeping only
  entries newer than the latest article already stored for the category.

The stop flag is checked before every fetch and every save.
"""
import asyncio
from concurrent.futures import Executor
from datetime import datetime
from typing import Dict, List, Optional, Set

from loguru import logger

from harvester.core.cursor_store import CursorStore
from harvester.core.ingestion_service import IngestionService
from harvester.core.page_fetcher import PageFetcher
from harvester.core.run_controller import RunController
from harvester.interfaces import Category, IPageExtractor, Source
from harvester.models import Article, FetchedPage, SourceConfig
from harvester.utils import RateLimiter


class SourceCrawler:
    """Runs the backlog and freshness phases for one source."""

    def __init__(self, extractor: IPageExtractor, config: SourceConfig,
                 fetcher: PageFetcher, cursor_store: CursorStore,
                 ingestion: IngestionService, run_controller: RunController,
                 parse_executor: Optional[Executor] = None, metrics=None):
        """Initialize the crawler.

        Args:
            extractor: Site-specific extraction rules
            config: Source configuration (paths and rate limit)
            fetcher: Shared page fetcher
            cursor_store: Resume cursor storage
            ingestion: Article persistence
            run_controller: Shared run state
            parse_executor: Pool for extraction work; the loop default when omitted
            metrics: Optional run metrics collector
        """
        self.extractor = extractor
        self.config = config
        self.fetcher = fetcher
        self.cursor_store = cursor_store
        self.ingestion = ingestion
        self.run_controller = run_controller
        self.parse_executor = parse_executor
        self.metrics = metrics
        self.rate_limiter = RateLimiter(config.rate_limit_per_second)

    @property
    def source(self) -> Source:
        return self.extractor.source

    def _stopped(self) -> bool:
        return self.run_controller.stop_requested

    async def run(self, latest_by_category: Optional[Dict[Category, Optional[datetime]]] = None) -> int:
        """Crawl every configured path of this source.

        Args:
            latest_by_category: Newest stored publish time per category

        Returns:
            Number of articles saved
        """
        latest_by_category = latest_by_category or {}
        total_saved = 0

        for category, path in self.config.paths():
            if self._stopped():
                break
            try:
                total_saved += await self.crawl_backlog(category, path)
                if self._stopped():
                    break
                total_saved += await self.crawl_fresh(category, path, latest_by_category.get(category))
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception(f"[{self.source.value}] Crawl of {category.value}/{path} failed: {e}")
                if self.metrics:
                    self.metrics.record_error(self.source.value, f"{category.value}/{path}: {e}")

        logger.info(f"[{self.source.value}] Finished with {total_saved} new articles")
        return total_saved

    async def crawl_backlog(self, category: Category, path: str) -> int:
        """Walk older listing pages starting at the stored cursor.

        The cursor moves to ``page + 1`` after a page that saved something
        and after a page that could not be downloaded. It is cleared once
        the listing is exhausted and left alone when a page yields nothing new.
        """
        source = self.source
        page = self.cursor_store.get_resume_page(source, category, path)
        if page is None:
            page = self.extractor.initial_page
        else:
            logger.debug(f"[{source.value}] Resuming {category.value}/{path} from page {page}")

        seen_hashes: Set[str] = set()
        total_saved = 0

        while not self._stopped():
            document = await self._fetch_listing(path, page)
            if document is None:
                if not self._stopped():
                    self.cursor_store.set_resume_page(source, category, path, page + 1)
                    logger.warning(f"[{source.value}] Listing page {page} of {path} unavailable, "
                                   f"resume cursor moved to {page + 1}")
                break

            content_hash = document.content_hash
            if content_hash in seen_hashes or self.extractor.is_last_page(document):
                self.cursor_store.clear_resume_page(source, category, path)
                logger.info(f"[{source.value}] Backlog of {category.value}/{path} exhausted at page {page}")
                break
            seen_hashes.add(content_hash)

            saved = await self._process_listing(document, category, cutoff=None)
            if saved is None or saved == 0:
                break

            total_saved += saved
            page += 1
            self.cursor_store.set_resume_page(source, category, path, page)

        return total_saved

    async def crawl_fresh(self, category: Category, path: str,
                          cutoff: Optional[datetime]) -> int:
        """Walk from the first listing page collecting articles newer than ``cutoff``."""
        page = self.extractor.initial_page
        total_saved = 0

        while not self._stopped():
            document = await self._fetch_listing(path, page)
            if document is None:
                break

            saved = await self._process_listing(document, category, cutoff=cutoff)
            if saved is None or saved == 0:
                break

            total_saved += saved
            page += 1

        return total_saved

    async def _process_listing(self, document: FetchedPage, category: Category,
                               cutoff: Optional[datetime]) -> Optional[int]:
        """Fetch, parse and save the articles a listing page links to.

        Returns:
            Articles saved, or None when the page had no usable entries or
            the run was stopped before saving
        """
        loop = asyncio.get_running_loop()
        urls = await loop.run_in_executor(
            self.parse_executor, self.extractor.extract_listing_entries, document, cutoff
        )
        if not urls or self._stopped():
            return None

        articles = await self.fetch_articles(urls, category)
        skipped = len(urls) - len(articles)
        if cutoff is not None:
            articles = [a for a in articles if a.published_at > cutoff]

        if self._stopped():
            return None

        saved = await self.ingestion.save_batch(articles)
        if self.metrics:
            self.metrics.record_articles(self.source.value, saved, skipped)
        logger.debug(f"[{self.source.value}] {document.url}: {len(urls)} entries, {saved} saved")
        return saved

    async def _fetch_listing(self, path: str, page: int) -> Optional[FetchedPage]:
        if self._stopped():
            return None
        document = await self.fetcher.fetch(self.extractor.listing_request(path, page), self.rate_limiter)
        if self.metrics and not self._stopped():
            self.metrics.record_page(self.source.value, document is not None)
        return document

    async def fetch_articles(self, urls: Set[str], category: Category) -> List[Article]:
        """Download and parse articles concurrently; failures are skipped."""
        results = await asyncio.gather(
            *(self._fetch_article(url, category) for url in sorted(urls))
        )
        return [article for article in results if article is not None]

    async def _fetch_article(self, url: str, category: Category) -> Optional[Article]:
        try:
            document = await self.fetcher.fetch(self.extractor.article_request(url), self.rate_limiter)
            if document is None:
                return None
            loop = asyncio.get_running_loop()
            article = await loop.run_in_executor(
                self.parse_executor, self.extractor.extract_article, document, category
            )
            if article is None:
                logger.debug(f"[{self.source.value}] Could not parse article {url}")
            return article
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.debug(f"[{self.source.value}] Skipping article {url}: {e}")
            return None
