# harvester/models/source_models.py
"""
Configuration models for sources and the crawler as a whole.
"""
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, List, Optional, Set

from harvester.interfaces import Category, Source


@dataclass
class SourceConfig:
    """Per-source crawl configuration.

    ``enabled`` is mutable at runtime; everything else is fixed at load time.
    """
    source: Source
    categories: Dict[Category, Set[str]] = field(default_factory=dict)
    rate_limit_per_second: float = 1.0
    enabled: bool = True

    def __post_init__(self):
        """Validate configuration."""
        if self.rate_limit_per_second <= 0:
            raise ValueError("Rate limit must be positive")

    def paths(self) -> List[tuple]:
        """All (category, path) pairs in a stable order."""
        return [
            (category, path)
            for category in sorted(self.categories, key=lambda c: c.value)
            for path in sorted(self.categories[category])
        ]


@dataclass
class CrawlerSettings:
    """Global crawler configuration."""
    sources: Dict[Source, SourceConfig] = field(default_factory=dict)
    max_concurrent_requests: int = 50
    request_timeout_seconds: float = 45.0
    parse_workers: int = 4
    auto_crawl_enabled: bool = False
    auto_crawl_interval: Optional[timedelta] = None

    def validate(self) -> List[str]:
        """Validate configuration and return errors."""
        errors = []

        if self.max_concurrent_requests <= 0:
            errors.append("max_concurrent_requests must be positive")

        if self.request_timeout_seconds <= 0:
            errors.append("request_timeout_seconds must be positive")

        if self.parse_workers <= 0:
            errors.append("parse_workers must be positive")

        return errors

    def is_source_enabled(self, source: Source) -> bool:
        config = self.sources.get(source)
        return bool(config and config.enabled)

    def source_statuses(self) -> Dict[Source, bool]:
        return {source: config.enabled for source, config in self.sources.items()}
