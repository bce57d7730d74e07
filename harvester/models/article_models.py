# harvester/models/article_models.py
"""
Article and page data models.
"""
from dataclasses import dataclass, field
from functools import cached_property
from datetime import datetime
from typing import Optional, Set
from urllib.parse import urljoin
import hashlib
import re
import uuid

from bs4 import BeautifulSoup

from harvester.interfaces import ArticleStatus, Category, Source


@dataclass
class Article:
    """A parsed news article.

    ``url`` is the natural key; ``article_id`` is assigned on first save
    and never changes afterwards.
    """
    title: str
    summary: str
    content: str
    category: Category
    url: str
    published_at: datetime
    source: Source
    keywords: Set[str] = field(default_factory=set)
    media_urls: Set[str] = field(default_factory=set)
    status: ArticleStatus = ArticleStatus.NEW
    article_id: Optional[uuid.UUID] = None

    def ensure_id(self) -> uuid.UUID:
        """Assign a random identity if the article does not have one yet."""
        if self.article_id is None:
            self.article_id = uuid.uuid4()
        return self.article_id


@dataclass(frozen=True)
class RequestSpec:
    """Description of a single HTTP request issued by the fetcher."""
    method: str
    url: str
    form_body: Optional[str] = None
    # POST endpoints answer with JSON; this names the field holding the HTML
    json_data_field: Optional[str] = None

    @classmethod
    def get(cls, url: str) -> 'RequestSpec':
        return cls(method="GET", url=url)

    @classmethod
    def post(cls, url: str, form_body: str, json_data_field: str = "data") -> 'RequestSpec':
        return cls(method="POST", url=url, form_body=form_body, json_data_field=json_data_field)


class FetchedPage:
    """A downloaded and parsed HTML document together with its location."""

    def __init__(self, url: str, soup: BeautifulSoup):
        self.url = url
        self.soup = soup

    @classmethod
    def from_html(cls, html: str, url: str = "") -> 'FetchedPage':
        return cls(url, BeautifulSoup(html, 'html.parser'))

    @property
    def text(self) -> str:
        return self.soup.get_text(" ", strip=True)

    @cached_property
    def content_hash(self) -> str:
        """Hash of the visible text, used to detect repeated listing pages. Computed once."""
        normalized = re.sub(r'\s+', ' ', self.text).strip()
        return hashlib.sha256(normalized.encode()).hexdigest()

    def abs_url(self, href: Optional[str]) -> str:
        """Resolve ``href`` against the page location; empty if missing."""
        if not href or not href.strip():
            return ""
        return urljoin(self.url, href.strip())

    def __repr__(self) -> str:
        return f"FetchedPage(url={self.url!r})"
