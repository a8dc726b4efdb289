"""Named text predicates behind the structural and citation rules.

Each predicate is a best-effort guess over weakly structured text. They are
kept apart from the rules so their accuracy can be tuned and tested alone.
"""

from __future__ import annotations

import re
from typing import Iterable

from .models import Paragraph

CITATION_CONTEXT_CHARS = 50

_DOUBLE_QUOTES = "\"“”"
_TOC_PATTERN = re.compile(r"table\s+of\s+contents", re.IGNORECASE)
_BIBLIOGRAPHY_PATTERN = re.compile(r"bibliography|references", re.IGNORECASE)
_BIBLIOGRAPHY_HEADING_PATTERN = re.compile(r"^(bibliography|references|works\s+cited)", re.IGNORECASE)
_ENTRY_AUTHOR_PATTERN = re.compile(r"^[A-Z][a-z]+")
_ENTRY_YEAR_PATTERN = re.compile(r"\d{4}")
_SURNAME_SPLIT_PATTERN = re.compile(r"[,\s]")
_CITATION_MARKER_PATTERN = re.compile(r"[\"'”’]\s*\d+")
_PAGE_RANGE_SUFFIX_PATTERN = re.compile(r"\bpp?\.\s*\d+\s*ff?\b", re.IGNORECASE)
_URL_PATTERN = re.compile(r"https?://|www\.", re.IGNORECASE)
_SPACED_FOOTNOTE_PATTERN = re.compile(r"[\"'”’]\s+\d+")
# Any comma or period before a closing double quote, even when the quotation is a full sentence.
_PUNCTUATION_INSIDE_QUOTES_PATTERN = re.compile(r"[,.][\"”]")
_APOSTROPHE_PATTERN = re.compile(r"(?<=\w)['’](?=\w)")
_SINGLE_QUOTE_PATTERN = re.compile(r"['‘’]")
_LEVEL_ONE_FORMAT_PATTERN = re.compile(r"^\d+\.\s+[A-Z\s]+$")
_DISSERTATION_CHAPTER_PATTERN = re.compile(r"^\d+\.\s+(CHAPTER\s+)?[A-Z\s]+$")
_CHAPTER_KEYWORD_PATTERN = re.compile(r"chapter|introduction|conclusion", re.IGNORECASE)
_HEADING_NUMBERING_PATTERNS = {
    2: re.compile(r"^\d+\.\d+\s+"),
    3: re.compile(r"^\d+\.\d+\.\d+\s+"),
    4: re.compile(r"^\d+\.\d+\.\d+\.\d+\s+"),
}


def is_cover_page_paragraph(
    paragraph: Paragraph,
    keywords: Iterable[str],
    paragraph_limit: int,
    max_chars: int,
) -> bool:
    """Early short lines and keyword lines belong to the cover page."""
    lowered = paragraph.text.lower()
    if any(keyword in lowered for keyword in keywords):
        return True
    return paragraph.index - 1 < paragraph_limit and len(paragraph.text.strip()) < max_chars


def has_table_of_contents(text: str) -> bool:
    return _TOC_PATTERN.search(text) is not None


def has_bibliography(text: str) -> bool:
    return _BIBLIOGRAPHY_PATTERN.search(text) is not None


def is_bibliography_heading(text: str) -> bool:
    return _BIBLIOGRAPHY_HEADING_PATTERN.match(text.strip()) is not None


def is_bibliography_entry(text: str) -> bool:
    stripped = text.strip()
    return (
        _ENTRY_AUTHOR_PATTERN.match(stripped) is not None
        and _ENTRY_YEAR_PATTERN.search(stripped) is not None
    )


def bibliography_sort_key(text: str) -> str:
    return _SURNAME_SPLIT_PATTERN.split(text.strip(), maxsplit=1)[0].lower()


def has_citation_marker(
    text: str,
    start: int,
    end: int,
    window: int = CITATION_CONTEXT_CHARS,
) -> bool:
    context = text[max(0, start - window) : min(len(text), end + window)]
    return _CITATION_MARKER_PATTERN.search(context) is not None


def has_page_range_suffix(text: str) -> bool:
    return _PAGE_RANGE_SUFFIX_PATTERN.search(text) is not None


def is_undated_informal_web_source(text: str, informal_pattern: str, access_pattern: str) -> bool:
    if _URL_PATTERN.search(text) is None:
        return False
    if re.search(access_pattern, text, re.IGNORECASE):
        return False
    return re.search(informal_pattern, text, re.IGNORECASE) is not None


def build_scripture_footnote_pattern(books: Iterable[str]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(book) for book in books)
    return re.compile(
        rf"\b(?:{alternation})\.?\s*\d+:\d+(?!\d)(?:[-–]\d+(?!\d))?[.)]{{0,2}}\s?\d{{1,3}}(?![\d:])"
    )


def has_scripture_footnote(text: str, pattern: re.Pattern[str]) -> bool:
    """A complete scripture reference followed by a stray footnote number."""
    return pattern.search(text) is not None


def has_spaced_footnote_marker(text: str) -> bool:
    return _SPACED_FOOTNOTE_PATTERN.search(text) is not None


def has_punctuation_inside_quotes(text: str) -> bool:
    return _PUNCTUATION_INSIDE_QUOTES_PATTERN.search(text) is not None


def uses_single_quote_marks(text: str) -> bool:
    if any(mark in text for mark in _DOUBLE_QUOTES):
        return False
    without_apostrophes = _APOSTROPHE_PATTERN.sub("", text)
    return _SINGLE_QUOTE_PATTERN.search(without_apostrophes) is not None


def is_all_caps(text: str) -> bool:
    return text == text.upper()


def is_level_one_heading_format(text: str) -> bool:
    return _LEVEL_ONE_FORMAT_PATTERN.match(text) is not None


def is_dissertation_chapter_format(text: str) -> bool:
    return _DISSERTATION_CHAPTER_PATTERN.match(text) is not None


def matches_heading_numbering(text: str, level: int) -> bool:
    if level == 1:
        return is_level_one_heading_format(text)
    pattern = _HEADING_NUMBERING_PATTERNS.get(level)
    if pattern is None:
        return True
    return pattern.match(text) is not None


def is_chapter_heading(text: str) -> bool:
    return _CHAPTER_KEYWORD_PATTERN.search(text) is not None


def keyword_offset(text: str, keyword: str) -> int:
    return text.lower().find(keyword.lower())
