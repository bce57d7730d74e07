"""
Unit tests for the aif.ru extractor.
"""
from datetime import date, datetime

import pytest

from harvester.extractors import AifRuExtractor
from harvester.extractors.aif_ru import parse_aif_datetime
from harvester.interfaces import Category, Source

LISTING_HTML = """
<div class="list_item">
  <div class="box_info"><a href="https://aif.ru/politics/russia/1">Свежая</a></div>
  <span class="text_box__date">07.05.2025 10:00</span>
</div>
<div class="list_item">
  <div class="box_info"><a href="/politics/russia/2">Старая</a></div>
  <span class="text_box__date">01.05.2025 10:00</span>
</div>
"""

ARTICLE_HTML = """
<h1 itemprop="headline">Заголовок</h1>
<time itemprop="datePublished">07.05.2025 18:45</time>
<img itemprop="image" src="https://aif.ru/img/1.jpg">
<div class="article_text">
  <p>Первое. Второе.</p>
  <h3>Раздел</h3>
  <p>Третье.</p>
</div>
<span itemprop="keywords">экономика</span>
<span itemprop="keywords">Рынок</span>
"""


@pytest.fixture
def extractor():
    return AifRuExtractor()


class TestAifRuListing:

    @pytest.mark.unit
    def test_request_is_form_post(self, extractor):
        request = extractor.listing_request("politics/russia", 3)
        assert request.method == "POST"
        assert request.url == "https://aif.ru/politics/russia"
        assert request.form_body == "page=3"
        assert request.json_data_field == "data"
        assert extractor.initial_page == 1

    @pytest.mark.unit
    def test_cutoff_scenario(self, extractor, make_page):
        page = make_page(LISTING_HTML, "https://aif.ru/politics/russia")
        assert extractor.extract_listing_entries(page, datetime(2025, 5, 2)) == {
            "https://aif.ru/politics/russia/1"
        }

    @pytest.mark.unit
    def test_relative_links_are_resolved(self, extractor, make_page):
        page = make_page(LISTING_HTML, "https://aif.ru/politics/russia")
        assert "https://aif.ru/politics/russia/2" in extractor.extract_listing_entries(page, None)


class TestAifRuDates:

    @pytest.mark.unit
    def test_full_datetime(self):
        assert parse_aif_datetime("07.05.2025 10:00") == datetime(2025, 5, 7, 10, 0)

    @pytest.mark.unit
    def test_time_only_means_today(self):
        assert parse_aif_datetime("12:30") == datetime.combine(date.today(), datetime(2000, 1, 1, 12, 30).time())

    @pytest.mark.unit
    def test_garbage(self):
        with pytest.raises(ValueError):
            parse_aif_datetime("вчера")


class TestAifRuArticle:

    @pytest.mark.unit
    def test_parses_article(self, extractor, make_page):
        article = extractor.extract_article(make_page(ARTICLE_HTML, "https://aif.ru/money/1"), Category.ECONOMICS)

        assert article.title == "Заголовок"
        assert article.summary == "Первое."
        assert article.content == "Первое. Второе.\n\nРаздел\n\nТретье."
        assert article.keywords == {"Экономика", "Рынок"}
        assert article.media_urls == {"https://aif.ru/img/1.jpg"}
        assert article.published_at == datetime(2025, 5, 7, 18, 45)
        assert article.source == Source.AIF_RU

    @pytest.mark.unit
    def test_missing_body_yields_none(self, extractor, make_page):
        html = ARTICLE_HTML.replace('class="article_text"', 'class="other"')
        assert extractor.extract_article(make_page(html, "https://aif.ru/money/1"), Category.ECONOMICS) is None
