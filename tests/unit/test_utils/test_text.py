"""
Unit tests for extractor text helpers.
"""
import pytest

from harvester.utils import first_sentence, join_paragraphs, normalize_keywords


class TestFirstSentence:

    @pytest.mark.unit
    def test_stops_at_first_terminator(self):
        assert first_sentence("Один. Два! Три?") == "Один."
        assert first_sentence("Вопрос? Ответ.") == "Вопрос?"

    @pytest.mark.unit
    def test_without_terminator_returns_whole_text(self):
        assert first_sentence("  без точки  ") == "без точки"

    @pytest.mark.unit
    def test_empty(self):
        assert first_sentence("") == ""
        assert first_sentence(None) == ""


class TestKeywords:

    @pytest.mark.unit
    def test_trims_capitalizes_and_drops_empty(self):
        assert normalize_keywords([" политика ", "", "  ", "ЕС", "спорт"]) == {"Политика", "ЕС", "Спорт"}


class TestJoinParagraphs:

    @pytest.mark.unit
    def test_joins_with_blank_line(self):
        assert join_paragraphs(["a ", "", " b"]) == "a\n\nb"
