# harvester/models/__init__.py
"""
Data models for the harvester.
"""

from .article_models import (
    Article,
    FetchedPage,
    RequestSpec
)

from .source_models import (
    SourceConfig,
    CrawlerSettings
)

from .status_models import (
    RunStatus,
    AutoScheduleStatus
)

__all__ = [
    # Article models
    'Article',
    'FetchedPage',
    'RequestSpec',

    # Source models
    'SourceConfig',
    'CrawlerSettings',

    # Status models
    'RunStatus',
    'AutoScheduleStatus'
]
