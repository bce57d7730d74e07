"""
Extraction rules for svpressa.ru.

Dates use Russian genitive month names with an optional year. Listing
entries only carry a date, so the cutoff is compared at day precision.
"""
from datetime import date, datetime
from typing import List, Tuple

from bs4 import Tag

from harvester.interfaces import Category, Source
from harvester.models import Article, FetchedPage, RequestSpec

from .base_extractor import BasePageExtractor, clean_text, require

URL_TEMPLATE = "https://svpressa.ru/{path}/?page={page}"
MONTHS = {
    "января": 1, "февраля": 2, "марта": 3,
    "апреля": 4, "мая": 5, "июня": 6,
    "июля": 7, "августа": 8, "сентября": 9,
    "октября": 10, "ноября": 11, "декабря": 12,
}


def parse_listing_date(text: str) -> date:
    """``7 мая`` or ``7 мая 2024``."""
    parts = text.split()
    day = int(parts[0])
    month = MONTHS[parts[1].lower()]
    year = int(parts[2]) if len(parts) == 3 else date.today().year
    return date(year, month, day)


def parse_article_datetime(text: str) -> datetime:
    """``7 мая 12:30`` or ``7 мая 2024 12:30``."""
    parts = text.split()
    day = int(parts[0])
    month = MONTHS[parts[1].lower()]
    if len(parts) == 3:
        year = date.today().year
        clock = parts[2]
    else:
        year = int(parts[2])
        clock = parts[3]
    hour, minute = (int(p) for p in clock.split(":"))
    return datetime(year, month, day, hour, minute)


class SvpressaRuExtractor(BasePageExtractor):
    SOURCE = Source.SVPRESSA_RU
    INITIAL_PAGE = 1
    BASE_URL = "https://svpressa.ru"

    def listing_request(self, path: str, page: int) -> RequestSpec:
        return RequestSpec.get(URL_TEMPLATE.format(path=path, page=page))

    def listing_items(self, page: FetchedPage) -> List[Tag]:
        return page.soup.select("article.b-article_item")

    def parse_entry(self, item: Tag, page: FetchedPage) -> Tuple[str, datetime]:
        link = require(item.select_one("a.b-article__title"), "a.b-article__title")
        date_tag = require(item.select_one("div.b-article__date"), "div.b-article__date")
        published = parse_listing_date(clean_text(date_tag))
        return page.abs_url(link.get("href")), datetime.combine(published, datetime.min.time())

    def is_newer(self, published_at: datetime, cutoff: datetime) -> bool:
        # Day precision: anything from the cutoff's own day may still be newer
        return published_at.date() >= cutoff.date()

    def parse_article(self, page: FetchedPage, category: Category) -> Article:
        soup = page.soup
        title = clean_text(require(soup.select_one("h1.b-text__title"), "h1.b-text__title"))
        lead = clean_text(require(soup.select_one("div.b-text__block > p"), "div.b-text__block > p"))
        date_tag = require(soup.select_one("div.b-text__date"), "div.b-text__date")

        return self.build_article(
            page, category,
            title=title,
            lead=lead,
            content=self.paragraphs(soup.select("div.b-text__block > p")),
            keywords=[kw.strip()[1:] for kw in self.texts(soup.select("a.b-tag__link"))],
            media=soup.select("div.b-text__img img"),
            published_at=parse_article_datetime(clean_text(date_tag)),
        )
