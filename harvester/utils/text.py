"""
Text helpers shared by the page extractors.
"""
import re
from typing import Iterable, Set

_FIRST_SENTENCE = re.compile(r'^(.*?[.!?])', re.DOTALL)


def first_sentence(text: str) -> str:
    """Return text up to and including the first ``.``, ``!`` or ``?``."""
    text = (text or "").strip()
    match = _FIRST_SENTENCE.match(text)
    return match.group(1) if match else text


def capitalize_first(word: str) -> str:
    return word[:1].upper() + word[1:]


def normalize_keywords(raw_keywords: Iterable[str]) -> Set[str]:
    """Trim, drop empties and upper-case the first letter of each keyword."""
    keywords = set()
    for keyword in raw_keywords:
        keyword = (keyword or "").strip()
        if keyword:
            keywords.add(capitalize_first(keyword))
    return keywords


def join_paragraphs(paragraphs: Iterable[str]) -> str:
    """Join non-empty trimmed paragraphs with blank lines."""
    return "\n\n".join(p.strip() for p in paragraphs if p and p.strip())
