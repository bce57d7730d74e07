"""
Article store backed by SQLAlchemy.

Inserts are conflict-ignoring on the live-URL index, so re-crawling the
same listing is harmless.
"""
import os
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from dotenv import load_dotenv
from loguru import logger
from sqlalchemy import create_engine, func, select, text, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection, Engine

from harvester.interfaces import ArticleStatus, Category, Source
from harvester.models import Article
from harvester.storage.schema import (
    LIVE_ROWS_CLAUSE, metadata, news_articles, news_keywords, news_media_urls,
)

DEFAULT_DATABASE_URL = "sqlite:///data/harvester.db"


def create_engine_from_env() -> Engine:
    """Create the engine from ``DATABASE_URL``."""
    load_dotenv()
    url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    if url.startswith("sqlite:///") and not url.startswith("sqlite:///:memory:"):
        directory = os.path.dirname(url[len("sqlite:///"):])
        if directory:
            os.makedirs(directory, exist_ok=True)
    return create_engine(url, pool_pre_ping=True)


class ArticleRepository:
    """Persistence for articles and their keyword/media rows."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def create_schema(self) -> None:
        metadata.create_all(self.engine)

    def _insert(self, table):
        if self.engine.dialect.name == "postgresql":
            return postgresql.insert(table)
        if self.engine.dialect.name == "sqlite":
            return sqlite.insert(table)
        raise NotImplementedError(f"Unsupported database dialect: {self.engine.dialect.name}")

    def upsert_batch(self, articles: List[Article]) -> int:
        """Insert articles, ignoring live-URL conflicts.

        Keyword and media rows are written only for rows actually inserted.

        Returns:
            Number of articles inserted
        """
        if not articles:
            return 0

        for article in articles:
            article.ensure_id()

        article_stmt = self._insert(news_articles).on_conflict_do_nothing(
            index_elements=["url"],
            index_where=text(LIVE_ROWS_CLAUSE),
        )

        inserted: List[Article] = []
        with self.engine.begin() as conn:
            for article in articles:
                result = conn.execute(article_stmt, self._article_row(article))
                if result.rowcount and result.rowcount > 0:
                    inserted.append(article)

            self._insert_children(conn, news_keywords, "keyword",
                                  ((a, kw) for a in inserted for kw in a.keywords))
            self._insert_children(conn, news_media_urls, "media_url",
                                  ((a, url) for a in inserted for url in a.media_urls))

        return len(inserted)

    def _insert_children(self, conn: Connection, table, column: str,
                         pairs: Iterable[Tuple[Article, str]]) -> None:
        rows = [{"article_id": str(article.article_id), column: value} for article, value in pairs]
        if not rows:
            return
        stmt = self._insert(table).on_conflict_do_nothing(index_elements=["article_id", column])
        conn.execute(stmt, rows)

    @staticmethod
    def _article_row(article: Article) -> dict:
        return {
            "id": str(article.article_id),
            "title": article.title,
            "summary": article.summary,
            "content": article.content,
            "category": article.category.value,
            "url": article.url,
            "status": article.status.value,
            "published_at": article.published_at,
            "source": article.source.value,
        }

    def latest_published_per_category_source(self) -> Dict[Source, Dict[Category, Optional[datetime]]]:
        """Max publish time per (source, category) over non-deleted articles.

        Every source/category pair is present; pairs without articles map to None.
        """
        stmt = (
            select(news_articles.c.source, news_articles.c.category,
                   func.max(news_articles.c.published_at))
            .where(news_articles.c.status != ArticleStatus.DELETED.value)
            .group_by(news_articles.c.source, news_articles.c.category)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).all()

        found: Dict[Tuple[str, str], datetime] = {(row[0], row[1]): row[2] for row in rows}
        result: Dict[Source, Dict[Category, Optional[datetime]]] = {}
        for source in Source:
            result[source] = {
                category: found.get((source.value, category.value))
                for category in Category
            }
        return result

    def promote_new_to_active(self) -> int:
        stmt = (
            update(news_articles)
            .where(news_articles.c.status == ArticleStatus.NEW.value)
            .values(status=ArticleStatus.ACTIVE.value)
        )
        with self.engine.begin() as conn:
            promoted = conn.execute(stmt).rowcount
        logger.debug(f"Promoted {promoted} articles from NEW to ACTIVE")
        return promoted

    def find_existing_urls(self, urls: Iterable[str]) -> Set[str]:
        """Subset of ``urls`` already stored as live articles."""
        urls = set(urls)
        if not urls:
            return set()
        stmt = (
            select(news_articles.c.url)
            .where(news_articles.c.url.in_(urls))
            .where(news_articles.c.status != ArticleStatus.DELETED.value)
        )
        with self.engine.connect() as conn:
            return set(conn.execute(stmt).scalars())

    def mark_deleted_before(self, before: datetime) -> int:
        """Bulk-mark articles published before ``before`` as deleted."""
        stmt = (
            update(news_articles)
            .where(news_articles.c.published_at < before)
            .where(news_articles.c.status != ArticleStatus.DELETED.value)
            .values(status=ArticleStatus.DELETED.value)
        )
        with self.engine.begin() as conn:
            deleted = conn.execute(stmt).rowcount
        return deleted

    def count_articles(self, status: Optional[ArticleStatus] = None) -> int:
        stmt = select(func.count()).select_from(news_articles)
        if status is not None:
            stmt = stmt.where(news_articles.c.status == status.value)
        with self.engine.connect() as conn:
            return conn.execute(stmt).scalar_one()

    def get_keywords(self, article_id) -> Set[str]:
        stmt = select(news_keywords.c.keyword).where(news_keywords.c.article_id == str(article_id))
        with self.engine.connect() as conn:
            return set(conn.execute(stmt).scalars())

    def get_media_urls(self, article_id) -> Set[str]:
        stmt = select(news_media_urls.c.media_url).where(news_media_urls.c.article_id == str(article_id))
        with self.engine.connect() as conn:
            return set(conn.execute(stmt).scalars())
