"""
Rate-limited, concurrency-bounded page downloads.

Every download takes a slot from one global semaphore shared by all
sources and then a token from the calling source's rate limiter. Failures
of any kind are logged and reported as ``None``; nothing is raised to the
crawl loop.
"""
import asyncio
from concurrent.futures import Executor
from typing import Dict, Optional

import aiohttp
from loguru import logger

from harvester.core.run_controller import RunController
from harvester.models import FetchedPage, RequestSpec
from harvester.utils import RateLimiter, UserAgentProvider

DEFAULT_HEADERS: Dict[str, str] = {
    "Accept-Language": "ru-RU,ru;q=0.9,en-US;q=0.8,en;q=0.7",
    "Accept-Encoding": "gzip, deflate",
    "Referer": "https://www.google.com",
    "Connection": "keep-alive",
    "Cache-Control": "no-cache",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8",
}


def _current_task_cancelling() -> bool:
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


class PageFetcher:
    """Downloads pages for all sources through one shared gate."""

    def __init__(self, run_controller: RunController,
                 user_agents: Optional[UserAgentProvider] = None,
                 max_concurrent_requests: int = 50,
                 timeout_seconds: float = 45.0,
                 parse_executor: Optional[Executor] = None):
        """Initialize the fetcher.

        Args:
            run_controller: Shared run state, read for the stop flag
            user_agents: Rotation pool; the built-in pool when omitted
            max_concurrent_requests: Capacity of the global gate
            timeout_seconds: Total timeout for one request
            parse_executor: Pool for HTML parsing; the loop default when omitted
        """
        self.run_controller = run_controller
        self.user_agents = user_agents or UserAgentProvider()
        self.max_concurrent_requests = max_concurrent_requests
        self.timeout_seconds = timeout_seconds
        self.parse_executor = parse_executor
        self._semaphore = asyncio.Semaphore(max_concurrent_requests)
        self._session: Optional[aiohttp.ClientSession] = None

    async def fetch(self, request: RequestSpec, rate_limiter: RateLimiter) -> Optional[FetchedPage]:
        """Download and parse one page.

        Returns:
            The parsed page, or None on stop, cancellation or any failure
        """
        if self._should_skip():
            return None

        async with self._semaphore:
            await rate_limiter.wait()

            if self._should_skip():
                return None

            try:
                return await self._download(request)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"Download from {request.url.strip()} failed: {e}")
                return None

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _should_skip(self) -> bool:
        return self.run_controller.stop_requested or _current_task_cancelling()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers=DEFAULT_HEADERS,
            )
        return self._session

    async def _download(self, request: RequestSpec) -> FetchedPage:
        session = await self._get_session()
        headers = {"User-Agent": self.user_agents.next_user_agent()}
        if request.method == "POST":
            headers["X-Requested-With"] = "XMLHttpRequest"
            headers["Content-Type"] = "application/x-www-form-urlencoded; charset=UTF-8"

        async with session.request(request.method, request.url,
                                   data=request.form_body, headers=headers) as response:
            response.raise_for_status()
            if request.json_data_field:
                payload = await response.json(content_type=None)
                html = payload[request.json_data_field]
                if not isinstance(html, str):
                    html = str(html)
            else:
                html = await response.text()
            location = str(response.url)

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.parse_executor, FetchedPage.from_html, html, location)
