# harvester/interfaces/news_source_interface.py
"""
Core contracts for the harvester.

Every news source plugs into the generic crawl loop through
``IPageExtractor``; everything source-specific (URLs, selectors, date
formats) lives behind it.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Optional, Set, TYPE_CHECKING

if TYPE_CHECKING:
    from harvester.models.article_models import Article, FetchedPage, RequestSpec


class Source(Enum):
    """Closed set of crawled sites."""
    RT_RU = "RT_RU"
    AIF_RU = "AIF_RU"
    SVPRESSA_RU = "SVPRESSA_RU"


class Category(Enum):
    """Closed set of article categories."""
    POLITICS = "POLITICS"
    ECONOMICS = "ECONOMICS"
    SOCIETY = "SOCIETY"
    SPORT = "SPORT"
    SCIENCE_TECH = "SCIENCE_TECH"


class ArticleStatus(Enum):
    """Article lifecycle: NEW -> ACTIVE -> DELETED."""
    NEW = "NEW"
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


class IPageExtractor(ABC):
    """Source-specific knowledge injected into the generic ``SourceCrawler``.

    Implementations must be pure with respect to the documents they are
    given: no network access, no persistence, and no exceptions escaping
    ``extract_listing_entries`` or ``extract_article``.
    """

    @property
    @abstractmethod
    def source(self) -> Source:
        """Source this extractor understands."""
        pass

    @property
    @abstractmethod
    def initial_page(self) -> int:
        """Index of the newest listing page (0 or 1 depending on the site)."""
        pass

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Site root used to resolve relative links."""
        pass

    @abstractmethod
    def listing_request(self, path: str, page: int) -> "RequestSpec":
        """Build the request fetching listing page ``page`` of ``path``."""
        pass

    def article_request(self, url: str) -> "RequestSpec":
        """Build the request fetching a single article page."""
        from harvester.models.article_models import RequestSpec
        return RequestSpec.get(url)

    @abstractmethod
    def extract_listing_entries(self, page: "FetchedPage",
                                cutoff: Optional[datetime]) -> Set[str]:
        """
        Collect article URLs strictly newer than ``cutoff``.

        Entries are walked newest-first and the walk stops at the first
        entry at-or-older than the cutoff. Malformed entries are skipped.

        Args:
            page: Parsed listing page
            cutoff: Latest known publish time, or None to accept everything

        Returns:
            Set of absolute article URLs
        """
        pass

    @abstractmethod
    def extract_article(self, page: "FetchedPage",
                        category: Category) -> Optional["Article"]:
        """
        Parse an article page.

        Returns:
            Article in NEW status, or None if any required field is missing
        """
        pass

    def is_last_page(self, page: "FetchedPage") -> bool:
        """Site-specific "no more pages" signal. Most sites have none."""
        return False


# Exceptions

class HarvesterError(Exception):
    """Base exception for harvester operations."""

    def __init__(self, message: str, source_name: str = "", cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.source_name = source_name
        self.cause = cause


class RunAlreadyInProgressError(HarvesterError):
    """Raised when a run is started while another one is still going."""

    def __init__(self, message: str = "Crawl run is already in progress"):
        super().__init__(message)


class RunNotInProgressError(HarvesterError):
    """Raised when a stop is requested but nothing is running."""

    def __init__(self, message: str = "Crawl run is not in progress"):
        super().__init__(message)


class InvalidIntervalFormatError(HarvesterError):
    """Raised for interval strings that do not match ``XdYhZm``."""

    def __init__(self, value: str):
        super().__init__(f"Invalid interval format: {value!r}")
        self.value = value


class IntervalIsZeroError(HarvesterError):
    """Raised when an interval adds up to zero."""

    def __init__(self, message: str = "Interval must be greater than zero"):
        super().__init__(message)


class ConfigurationError(HarvesterError):
    """Raised when crawler configuration cannot be used."""
    pass
