"""
Extraction rules for aif.ru.

Listing pages are served by a POST endpoint that wraps the HTML in JSON.
Timestamps are either ``DD.MM.YYYY HH:MM`` or a bare ``HH:MM`` for today.
"""
from datetime import date, datetime
from typing import List, Tuple

from bs4 import Tag

from harvester.interfaces import Category, Source
from harvester.models import Article, FetchedPage, RequestSpec

from .base_extractor import BasePageExtractor, clean_text, require

URL_TEMPLATE = "https://aif.ru/{path}"
BODY_TEMPLATE = "page={page}"
CONTENT_SELECTOR = ", ".join(
    f"div.article_text > {tag}" for tag in ("p", "h1", "h2", "h3", "h4", "h5", "h6")
)


def parse_aif_datetime(text: str) -> datetime:
    text = (text or "").strip()
    try:
        return datetime.strptime(text, "%d.%m.%Y %H:%M")
    except ValueError:
        time_only = datetime.strptime(text, "%H:%M").time()
        return datetime.combine(date.today(), time_only)


class AifRuExtractor(BasePageExtractor):
    SOURCE = Source.AIF_RU
    INITIAL_PAGE = 1
    BASE_URL = "https://aif.ru"

    def listing_request(self, path: str, page: int) -> RequestSpec:
        return RequestSpec.post(URL_TEMPLATE.format(path=path), BODY_TEMPLATE.format(page=page))

    def listing_items(self, page: FetchedPage) -> List[Tag]:
        return page.soup.select("div.list_item")

    def parse_entry(self, item: Tag, page: FetchedPage) -> Tuple[str, datetime]:
        link = require(item.select_one("div.box_info a"), "div.box_info a")
        date_tag = require(item.select_one("span.text_box__date"), "span.text_box__date")
        return page.abs_url(link.get("href")), parse_aif_datetime(clean_text(date_tag))

    def parse_article(self, page: FetchedPage, category: Category) -> Article:
        soup = page.soup
        title = clean_text(require(soup.select_one("h1[itemprop=headline]"), "h1[itemprop=headline]"))
        lead = clean_text(require(soup.select_one(CONTENT_SELECTOR), CONTENT_SELECTOR))
        time_tag = require(soup.select_one("time[itemprop=datePublished]"), "time[itemprop=datePublished]")

        return self.build_article(
            page, category,
            title=title,
            lead=lead,
            content=self.paragraphs(soup.select(CONTENT_SELECTOR)),
            keywords=self.texts(soup.select("span[itemprop=keywords]")),
            media=soup.select("img[itemprop=image]"),
            published_at=parse_aif_datetime(clean_text(time_tag)),
        )
