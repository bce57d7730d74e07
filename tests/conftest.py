"""
Shared test configuration and fixtures for the news harvester tests.

This module provides common fixtures, mocks, and page builders used across all test modules.
"""
import os
import sys
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import fakeredis
import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from harvester.core import CursorStore, IngestionService, RunController
from harvester.interfaces import Category, Source
from harvester.models import Article, CrawlerSettings, FetchedPage, SourceConfig
from harvester.storage import ArticleRepository


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite shared across threads (repository calls run in to_thread)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def repository(sqlite_engine):
    repo = ArticleRepository(sqlite_engine)
    repo.create_schema()
    return repo


@pytest.fixture
def ingestion(repository):
    return IngestionService(repository)


@pytest.fixture
def mock_redis_client():
    """Mock Redis client for testing."""
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def cursor_store(mock_redis_client):
    return CursorStore(mock_redis_client)


@pytest.fixture
def run_controller():
    return RunController()


@pytest.fixture
def sample_source_config():
    """Sample source configuration for testing."""
    return SourceConfig(
        source=Source.RT_RU,
        categories={Category.POLITICS: {"politics"}},
        rate_limit_per_second=1000.0,
    )


@pytest.fixture
def sample_settings(sample_source_config):
    return CrawlerSettings(sources={Source.RT_RU: sample_source_config})


@pytest.fixture
def make_article():
    """Factory for articles with sensible defaults."""
    def _make(url="https://example.com/news/1", published_at=None, **overrides):
        fields = dict(
            title="Заголовок",
            summary="Первое предложение.",
            content="Первое предложение. Второе предложение.",
            category=Category.POLITICS,
            url=url,
            published_at=published_at or datetime(2025, 5, 7, 12, 0),
            source=Source.RT_RU,
        )
        fields.update(overrides)
        return Article(**fields)
    return _make


@pytest.fixture
def make_page():
    """Factory for parsed pages from raw HTML."""
    def _make(html, url="https://example.com/"):
        return FetchedPage.from_html(html, url)
    return _make


@pytest.fixture
def mock_ingestion():
    """Ingestion service double with no stored articles."""
    service = MagicMock()
    service.prepare_run = AsyncMock()
    service.latest_published_by_category_and_source = AsyncMock(return_value={})
    service.save_batch = AsyncMock(side_effect=lambda articles: len(articles))
    return service
