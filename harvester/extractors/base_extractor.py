# harvester/extractors/base_extractor.py
"""
Shared skeleton for HTML page extractors.

Subclasses describe a site through a handful of hooks (listing items,
how to read one entry, how to parse an article); the listing walk, the
cutoff rule and the never-raise guarantee live here.
"""
from abc import abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional, Set, Tuple

from bs4 import Tag
from loguru import logger

from harvester.interfaces import Category, IPageExtractor, Source
from harvester.models import Article, FetchedPage
from harvester.utils import first_sentence, join_paragraphs, normalize_keywords


class MissingElementError(ValueError):
    """A required element or attribute is absent from the page."""
    pass


def clean_text(element: Optional[Tag]) -> str:
    """Visible text of ``element`` with whitespace collapsed."""
    if element is None:
        return ""
    return " ".join(element.get_text(" ").split())


def require(element: Optional[Tag], selector: str) -> Tag:
    if element is None:
        raise MissingElementError(f"Missing element: {selector}")
    return element


class BasePageExtractor(IPageExtractor):
    """Template for listing/article extraction on a single site."""

    SOURCE: Source
    INITIAL_PAGE: int = 1
    BASE_URL: str = ""

    @property
    def source(self) -> Source:
        return self.SOURCE

    @property
    def initial_page(self) -> int:
        return self.INITIAL_PAGE

    @property
    def base_url(self) -> str:
        return self.BASE_URL

    # Hooks

    @abstractmethod
    def listing_items(self, page: FetchedPage) -> List[Tag]:
        """Listing entries in page order (newest first)."""
        pass

    @abstractmethod
    def parse_entry(self, item: Tag, page: FetchedPage) -> Tuple[str, datetime]:
        """Absolute URL and displayed timestamp of one listing entry."""
        pass

    @abstractmethod
    def parse_article(self, page: FetchedPage, category: Category) -> Article:
        """Build an article or raise if a required field is missing."""
        pass

    def is_newer(self, published_at: datetime, cutoff: datetime) -> bool:
        return published_at > cutoff

    # Contract

    def extract_listing_entries(self, page: FetchedPage,
                                cutoff: Optional[datetime]) -> Set[str]:
        urls: Set[str] = set()
        try:
            items = self.listing_items(page)
        except Exception as e:
            logger.debug(f"Could not read listing {page.url}: {e}")
            return urls

        for item in items:
            try:
                url, published_at = self.parse_entry(item, page)
            except Exception:
                continue
            if not url:
                continue
            if cutoff is not None and not self.is_newer(published_at, cutoff):
                break
            urls.add(url)
        return urls

    def extract_article(self, page: FetchedPage, category: Category) -> Optional[Article]:
        try:
            return self.parse_article(page, category)
        except Exception as e:
            logger.debug(f"Skipping invalid article {page.url}: {e}")
            return None

    # Helpers for subclasses

    def build_article(self, page: FetchedPage, category: Category, *,
                      title: str, lead: str, content: str,
                      keywords: Iterable[str], media: Iterable[Tag],
                      published_at: datetime) -> Article:
        if not title:
            raise MissingElementError("Empty title")
        if not content:
            raise MissingElementError("Empty content")
        if not page.url:
            raise MissingElementError("Unknown article URL")

        media_urls = {page.abs_url(img.get("src")) for img in media}
        media_urls.discard("")

        return Article(
            title=title,
            summary=first_sentence(lead),
            content=content,
            category=category,
            url=page.url,
            published_at=published_at,
            source=self.source,
            keywords=normalize_keywords(keywords),
            media_urls=media_urls,
        )

    @staticmethod
    def texts(elements: Iterable[Tag]) -> List[str]:
        return [clean_text(el) for el in elements]

    @staticmethod
    def paragraphs(elements: Iterable[Tag]) -> str:
        return join_paragraphs(clean_text(el) for el in elements)
