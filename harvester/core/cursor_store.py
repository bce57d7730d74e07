"""
Redis-backed resume cursors for backlog scanning.
"""
import os
from typing import Optional
from urllib.parse import quote

import redis
from dotenv import load_dotenv
from loguru import logger

from harvester.interfaces import Category, Source

KEY_PREFIX = "state"


def create_redis_client() -> redis.Redis:
    """Build a Redis client from ``REDIS_*`` environment variables."""
    load_dotenv()
    redis_params = {
        'host': os.getenv("REDIS_HOST", "localhost"),
        'port': int(os.getenv("REDIS_PORT", 6379)),
        'password': os.getenv("REDIS_PASSWORD") or None,
        'db': int(os.getenv("REDIS_DB", 0)),
        'ssl': os.getenv("REDIS_USE_SSL", "false").lower() == "true",
        'decode_responses': True
    }

    # Only add username if it's not empty and not just whitespace
    redis_username = os.getenv("REDIS_USERNAME")
    if redis_username and redis_username.strip():
        redis_params['username'] = redis_username.strip()

    return redis.Redis(**redis_params)


class CursorStore:
    """Next page to fetch when resuming backlog scanning, per (source, category, path).

    An absent key means no backlog scan is in progress for that path.
    """

    def __init__(self, redis_client: redis.Redis):
        self.redis_client = redis_client

    @staticmethod
    def make_key(source: Source, category: Category, path: str) -> str:
        """Compose a deterministic, URL-safe key."""
        safe_path = quote(path, safe="")
        return f"{KEY_PREFIX}:{source.value}:{category.value}:{safe_path}"

    def get_resume_page(self, source: Source, category: Category, path: str) -> Optional[int]:
        stored = self.redis_client.get(self.make_key(source, category, path))
        if stored is None:
            return None
        try:
            return int(stored)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring malformed resume cursor {stored!r} for {source.value}/{category.value}/{path}")
            return None

    def set_resume_page(self, source: Source, category: Category, path: str, page: int) -> None:
        self.redis_client.set(self.make_key(source, category, path), str(page))

    def clear_resume_page(self, source: Source, category: Category, path: str) -> None:
        self.redis_client.delete(self.make_key(source, category, path))
