"""
Extraction rules for russian.rt.com.
"""
from datetime import datetime
from typing import List, Tuple

from bs4 import Tag

from harvester.interfaces import Category, Source
from harvester.models import Article, FetchedPage, RequestSpec

from .base_extractor import BasePageExtractor, clean_text, require

URL_TEMPLATE = "https://russian.rt.com/listing/type.ArticleVideoGallery.trend.{path}/prepare/all-trends-new/50/{page}"
CONTENT_SELECTOR = ", ".join(
    f"div.article__text > {tag}" for tag in ("p", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote")
)
DATETIME_FORMAT = "%Y-%m-%d %H:%M"


class RtRuExtractor(BasePageExtractor):
    SOURCE = Source.RT_RU
    INITIAL_PAGE = 0
    BASE_URL = "https://russian.rt.com"

    def listing_request(self, path: str, page: int) -> RequestSpec:
        return RequestSpec.get(URL_TEMPLATE.format(path=path, page=page))

    def listing_items(self, page: FetchedPage) -> List[Tag]:
        return page.soup.select("li.listing__column")

    def parse_entry(self, item: Tag, page: FetchedPage) -> Tuple[str, datetime]:
        link = require(item.select_one("a.link"), "a.link")
        time_tag = require(item.select_one("time.date"), "time.date")
        return page.abs_url(link.get("href")), self.parse_datetime(time_tag.get("datetime"))

    def parse_article(self, page: FetchedPage, category: Category) -> Article:
        soup = page.soup
        title = clean_text(require(soup.select_one("h1.article__heading"), "h1.article__heading"))
        lead = clean_text(require(soup.select_one("div.article__summary"), "div.article__summary"))
        body = self.paragraphs(soup.select(CONTENT_SELECTOR))
        content = f"{lead}\n\n{body}" if body else lead
        time_tag = require(soup.select_one("time.date"), "time.date")

        return self.build_article(
            page, category,
            title=title,
            lead=lead,
            content=content,
            keywords=self.texts(soup.select("a.tags-trends__link")),
            media=soup.select("img.article__cover-image"),
            published_at=self.parse_datetime(time_tag.get("datetime")),
        )

    @staticmethod
    def parse_datetime(value) -> datetime:
        return datetime.strptime((value or "").strip(), DATETIME_FORMAT)
