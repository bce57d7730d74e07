"""
Unit tests for the ingestion service.
"""
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from harvester.core import IngestionService
from harvester.interfaces import ArticleStatus, Category, Source


class TestIngestionService:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_save_batch_returns_inserted_count(self, ingestion, make_article):
        saved = await ingestion.save_batch([
            make_article("https://example.com/1"),
            make_article("https://example.com/1"),
        ])
        assert saved == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_batch_skips_repository(self):
        repository = MagicMock()
        service = IngestionService(repository)
        assert await service.save_batch([]) == 0
        repository.upsert_batch.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_prepare_run_promotes_and_invalidates(self, repository, make_article):
        invalidator = MagicMock()
        service = IngestionService(repository, cache_invalidators=[invalidator])
        repository.upsert_batch([make_article()])

        await service.prepare_run()

        invalidator.assert_called_once()
        assert repository.count_articles(ArticleStatus.ACTIVE) == 1
        assert repository.count_articles(ArticleStatus.NEW) == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_latest_map(self, ingestion, make_article):
        await ingestion.save_batch([make_article(published_at=datetime(2025, 5, 2, 9, 30))])
        latest = await ingestion.latest_published_by_category_and_source()
        assert latest[Source.RT_RU][Category.POLITICS] == datetime(2025, 5, 2, 9, 30)
        assert latest[Source.RT_RU][Category.SPORT] is None
