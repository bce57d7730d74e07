"""
Unit tests for the page fetcher.

Network access is replaced by patching ``PageFetcher._download``.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from harvester.core import PageFetcher
from harvester.models import FetchedPage, RequestSpec
from harvester.utils import RateLimiter


@pytest.fixture
def rate_limiter():
    return RateLimiter(1000.0)


@pytest.fixture
def fetcher(run_controller):
    return PageFetcher(run_controller, max_concurrent_requests=2)


class TestPageFetcher:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_returns_parsed_page(self, fetcher, rate_limiter):
        page = FetchedPage.from_html("<p>ok</p>", "https://example.com/")
        with patch.object(PageFetcher, '_download', new_callable=AsyncMock, return_value=page) as mock_download:
            result = await fetcher.fetch(RequestSpec.get("https://example.com/"), rate_limiter)

        assert result is page
        mock_download.assert_awaited_once()

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        aiohttp.ClientError("boom"),
        asyncio.TimeoutError(),
        KeyError("data"),
        ValueError("bad json"),
    ])
    async def test_failures_become_none(self, fetcher, rate_limiter, error):
        with patch.object(PageFetcher, '_download', new_callable=AsyncMock, side_effect=error):
            result = await fetcher.fetch(RequestSpec.get("https://example.com/"), rate_limiter)
        assert result is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stop_requested_skips_request(self, fetcher, run_controller, rate_limiter):
        run_controller.try_start()
        run_controller.stop()
        with patch.object(PageFetcher, '_download', new_callable=AsyncMock) as mock_download:
            result = await fetcher.fetch(RequestSpec.get("https://example.com/"), rate_limiter)

        assert result is None
        mock_download.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stop_while_waiting_for_rate_limit(self, fetcher, run_controller):
        run_controller.try_start()
        limiter = MagicMock()

        async def wait_and_stop():
            run_controller.stop()

        limiter.wait = wait_and_stop
        with patch.object(PageFetcher, '_download', new_callable=AsyncMock) as mock_download:
            result = await fetcher.fetch(RequestSpec.get("https://example.com/"), limiter)

        assert result is None
        mock_download.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self, fetcher, rate_limiter):
        active = 0
        peak = 0

        async def slow_download(request):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return FetchedPage.from_html("<p/>", request.url)

        with patch.object(PageFetcher, '_download', side_effect=slow_download):
            results = await asyncio.gather(*(
                fetcher.fetch(RequestSpec.get(f"https://example.com/{i}"), rate_limiter) for i in range(6)
            ))

        assert all(result is not None for result in results)
        assert peak == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_slot_released_after_failure(self, fetcher, rate_limiter):
        with patch.object(PageFetcher, '_download', new_callable=AsyncMock, side_effect=RuntimeError("x")):
            for _ in range(5):
                assert await fetcher.fetch(RequestSpec.get("https://example.com/"), rate_limiter) is None
        assert not fetcher._semaphore.locked()
