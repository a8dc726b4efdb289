from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Iterable

from . import config

STYLE_GUIDE_SCHEMA_VERSION = "1.0"


@dataclass(frozen=True)
class MarginSpec:
    top: float
    bottom: float
    left: float
    right: float

    def get(self, side: str) -> float:
        return getattr(self, side)

    def to_dict(self) -> dict[str, float]:
        return {"top": self.top, "bottom": self.bottom, "left": self.left, "right": self.right}


@dataclass(frozen=True)
class CoverElement:
    key: str
    display_name: str
    pattern: str

    def validate(self) -> None:
        if not self.key.strip():
            raise ValueError("cover element key must be non-empty")
        if not self.display_name.strip():
            raise ValueError("cover element display_name must be non-empty")
        _validate_pattern(self.pattern, f"cover element {self.key!r}")

    def matches(self, text: str) -> bool:
        return re.search(self.pattern, text, re.IGNORECASE) is not None

    def to_dict(self) -> dict[str, object]:
        return {"key": self.key, "display_name": self.display_name, "pattern": self.pattern}


@dataclass(frozen=True)
class LatinAbbreviation:
    term: str
    full: str
    replacement: str
    pattern: str

    def validate(self) -> None:
        if not self.term.strip():
            raise ValueError("abbreviation term must be non-empty")
        _validate_pattern(self.pattern, f"abbreviation {self.term!r}")

    def finditer(self, text: str) -> Iterable[re.Match[str]]:
        return re.finditer(self.pattern, text, re.IGNORECASE)

    def to_dict(self) -> dict[str, object]:
        return {
            "term": self.term,
            "full": self.full,
            "replacement": self.replacement,
            "pattern": self.pattern,
        }


SAIACS_COVER_ELEMENTS: tuple[CoverElement, ...] = (
    CoverElement(
        key="institution_header",
        display_name="SAIACS header",
        pattern=r"SOUTH\s+ASIA\s+INSTITUTE\s+OF\s+ADVANCED\s+CHRISTIAN\s+STUDIES",
    ),
    CoverElement(key="submitted_to", display_name='"Submitted to"', pattern=r"submitted\s+to"),
    CoverElement(
        key="partial_fulfillment",
        display_name='"In Partial Fulfillment"',
        pattern=r"partial\s+fulfil?ll?ment",
    ),
    CoverElement(key="due_date", display_name="Due Date", pattern=r"due\s+date"),
    CoverElement(
        key="expected_count",
        display_name="Expected Time/Word Count",
        pattern=r"expected\s+(time|word)",
    ),
    CoverElement(
        key="actual_count",
        display_name="Actual Time/Word Count",
        pattern=r"actual\s+(time|word)",
    ),
)

SAIACS_LATIN_ABBREVIATIONS: tuple[LatinAbbreviation, ...] = (
    LatinAbbreviation(
        term="ibid",
        full="ibidem",
        replacement="abbreviated footnote style",
        pattern=r"\bibid",
    ),
    LatinAbbreviation(
        term="et al",
        full="et alii",
        replacement='"and others"',
        pattern=r"\bet\s+al\b",
    ),
    LatinAbbreviation(
        term="op. cit.",
        full="opere citato",
        replacement="full abbreviated reference",
        pattern=r"\bop\.\s*cit\.",
    ),
    LatinAbbreviation(
        term="loc. cit.",
        full="loco citato",
        replacement="full abbreviated reference",
        pattern=r"\bloc\.\s*cit\.",
    ),
)

SCRIPTURE_BOOKS: tuple[str, ...] = (
    "Gen", "Exod", "Lev", "Num", "Deut", "Josh", "Judg", "Ruth", "Sam", "Kings",
    "Chron", "Ezra", "Neh", "Esther", "Job", "Ps", "Prov", "Eccles", "Song", "Isa",
    "Jer", "Lam", "Ezek", "Dan", "Hosea", "Joel", "Amos", "Obad", "Jon", "Mic",
    "Nah", "Hab", "Zeph", "Hag", "Zech", "Mal", "Matt", "Mark", "Luke", "John",
    "Acts", "Rom", "Cor", "Gal", "Eph", "Phil", "Col", "Thess", "Tim", "Titus",
    "Philem", "Heb", "James", "Pet", "Jude", "Rev",
)

COVER_PAGE_KEYWORDS: tuple[str, ...] = (
    "south asia institute",
    "submitted to",
    "partial fulfillment",
    "due date",
    "expected time",
    "actual time",
    "expected word",
    "actual word",
    "academic honesty",
    "signature:",
    "admission no",
)

HONESTY_DECLARATION_TEXT = (
    "I declare that this assignment is my own unaided work. I have not copied it "
    "from any person, article, book, website or other form of storage. Every idea "
    "or phrase that is not my own has been duly acknowledged."
)


@dataclass(frozen=True)
class StyleGuide:
    """Versioned set of institutional style requirements consumed by the rule modules."""

    key: str
    display_name: str
    version: str
    required_font: str = "Times New Roman"
    required_font_size: float = 12
    body_size_range: tuple[float, float] = (10, 13)
    allowed_fonts: tuple[str, ...] = ("Symbol", "Courier New")
    footnote_allowed_fonts: tuple[str, ...] = ("Symbol",)
    allowed_body_sizes: tuple[float, ...] = (10,)
    footnote_font_size: float = 10
    footnote_max_chars: int = 500
    required_line_spacing: float = 1.5
    line_spacing_tolerance: float = 0.2
    margins: dict[str, MarginSpec] = field(
        default_factory=lambda: {
            "assignment": MarginSpec(top=1, bottom=1, left=1, right=1),
            "dissertation": MarginSpec(top=1, bottom=1, left=1.5, right=1),
        }
    )
    margin_tolerance: float = 0.1
    max_document_fonts: int = 2
    cover_page_keywords: tuple[str, ...] = COVER_PAGE_KEYWORDS
    cover_page_paragraph_limit: int = 30
    cover_page_max_chars: int = 100
    cover_elements: tuple[CoverElement, ...] = SAIACS_COVER_ELEMENTS
    honesty_declaration_text: str = HONESTY_DECLARATION_TEXT
    honesty_declaration_pattern: str = (
        r"(I\s+)?declare\s+that\s+this\s+assignment\s+is\s+(my|our)\s+own\s+unaided\s+work"
    )
    signature_pattern: str = r"signature\s*:"
    declaration_page_pattern: str = r"(declaration|hereby\s+declare)"
    latin_abbreviations: tuple[LatinAbbreviation, ...] = SAIACS_LATIN_ABBREVIATIONS
    informal_source_pattern: str = r"blog|wordpress|medium|personal"
    access_date_pattern: str = r"accessed"
    scripture_books: tuple[str, ...] = SCRIPTURE_BOOKS
    citation_bibliography_min_words: int = 2000
    structure_bibliography_min_words: int = 1500
    introduction_max_offset: int = 1000
    bibliography_end_distance: int = 1000
    min_chapters: int = 3
    max_heading_depth: int = 4
    page_number_location: str = "bottom center"

    def __hash__(self) -> int:
        return hash((self.key, self.version))

    def validate(self) -> None:
        if not self.key.strip():
            raise ValueError("style guide key must be non-empty")
        if not self.display_name.strip():
            raise ValueError("style guide display_name must be non-empty")
        if not self.required_font.strip():
            raise ValueError("style guide required_font must be non-empty")
        low, high = self.body_size_range
        if low > high:
            raise ValueError("body_size_range must be ordered (low, high)")
        if self.required_font_size <= 0 or self.footnote_font_size <= 0:
            raise ValueError("font sizes must be positive")
        if self.margin_tolerance < 0 or self.line_spacing_tolerance < 0:
            raise ValueError("tolerances must be non-negative")
        missing = [doc_type for doc_type in config.DOCUMENT_TYPES if doc_type not in self.margins]
        if missing:
            raise ValueError(f"margins missing for document types: {', '.join(missing)}")
        for element in self.cover_elements:
            element.validate()
        for abbreviation in self.latin_abbreviations:
            abbreviation.validate()
        for name in (
            "honesty_declaration_pattern",
            "signature_pattern",
            "declaration_page_pattern",
            "informal_source_pattern",
            "access_date_pattern",
        ):
            _validate_pattern(getattr(self, name), name)

    def margins_for(self, document_type: str) -> MarginSpec:
        spec = self.margins.get(document_type)
        if spec is None:
            spec = self.margins[config.DEFAULT_DOCUMENT_TYPE]
        return spec

    def to_dict(self) -> dict[str, object]:
        return {
            "key": self.key,
            "display_name": self.display_name,
            "version": self.version,
            "required_font": self.required_font,
            "required_font_size": self.required_font_size,
            "footnote_font_size": self.footnote_font_size,
            "required_line_spacing": self.required_line_spacing,
            "margins": {doc_type: spec.to_dict() for doc_type, spec in self.margins.items()},
            "cover_elements": [element.to_dict() for element in self.cover_elements],
            "latin_abbreviations": [item.to_dict() for item in self.latin_abbreviations],
        }


DEFAULT_STYLE_GUIDES: tuple[StyleGuide, ...] = (
    StyleGuide(
        key=config.DEFAULT_STYLE_GUIDE_KEY,
        display_name="The SAIACS Style Guide for Research and Writing",
        version="2020-2021",
    ),
)

_SCALAR_OVERRIDES = {
    "display_name": str,
    "version": str,
    "required_font": str,
    "required_font_size": float,
    "footnote_font_size": float,
    "footnote_max_chars": int,
    "required_line_spacing": float,
    "line_spacing_tolerance": float,
    "margin_tolerance": float,
    "max_document_fonts": int,
    "cover_page_paragraph_limit": int,
    "cover_page_max_chars": int,
    "citation_bibliography_min_words": int,
    "structure_bibliography_min_words": int,
    "introduction_max_offset": int,
    "bibliography_end_distance": int,
    "min_chapters": int,
    "max_heading_depth": int,
    "page_number_location": str,
}
_TUPLE_OVERRIDES = ("allowed_fonts", "footnote_allowed_fonts", "cover_page_keywords", "scripture_books")


def iter_style_guides(path: Path | None = None) -> Iterable[StyleGuide]:
    custom = load_style_guides(path if path is not None else config.STYLE_GUIDES_PATH)
    custom_map = {guide.key.lower(): guide for guide in custom}
    merged: list[StyleGuide] = []
    for guide in DEFAULT_STYLE_GUIDES:
        override = custom_map.pop(guide.key.lower(), None)
        merged.append(override if override is not None else guide)
    if custom_map:
        merged.extend(sorted(custom_map.values(), key=lambda item: item.key.lower()))
    return merged


def resolve_style_guide(key: str | None = None, path: Path | None = None) -> StyleGuide:
    guides = list(iter_style_guides(path))
    normalized = (key or config.DEFAULT_STYLE_GUIDE_KEY).strip().lower()
    for guide in guides:
        if guide.key.lower() == normalized:
            return guide
    for guide in guides:
        if guide.key == config.DEFAULT_STYLE_GUIDE_KEY:
            return guide
    return guides[0]


def resolve_document_type(value: str | None) -> str:
    normalized = (value or "").strip().lower()
    if normalized in config.DOCUMENT_TYPES:
        return normalized
    return config.DEFAULT_DOCUMENT_TYPE


def load_style_guides(path: Path) -> list[StyleGuide]:
    if not path.exists() or not path.is_file():
        return []
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return []
    if isinstance(raw, dict):
        items = raw.get("style_guides")
    else:
        items = raw
    if not isinstance(items, list):
        return []
    base = DEFAULT_STYLE_GUIDES[0]
    guides: list[StyleGuide] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        guide = _style_guide_from_dict(item, base)
        if guide is None:
            continue
        try:
            guide.validate()
        except ValueError:
            continue
        guides.append(guide)
    return guides


def _style_guide_from_dict(data: dict[str, object], base: StyleGuide) -> StyleGuide | None:
    key = data.get("key")
    if not isinstance(key, str) or not key.strip():
        return None
    changes: dict[str, object] = {"key": key.strip()}
    for name, caster in _SCALAR_OVERRIDES.items():
        if name not in data:
            continue
        try:
            changes[name] = caster(data[name])
        except (TypeError, ValueError):
            return None
    for name in _TUPLE_OVERRIDES:
        value = data.get(name)
        if isinstance(value, list):
            changes[name] = tuple(str(item).strip() for item in value if str(item).strip())
    margins = data.get("margins")
    if isinstance(margins, dict):
        merged = dict(base.margins)
        for doc_type, spec in margins.items():
            parsed = _margin_spec_from_dict(spec)
            if parsed is None:
                return None
            merged[str(doc_type)] = parsed
        changes["margins"] = merged
    valid_names = {item.name for item in fields(StyleGuide)}
    return replace(base, **{name: value for name, value in changes.items() if name in valid_names})


def _margin_spec_from_dict(data: object) -> MarginSpec | None:
    if not isinstance(data, dict):
        return None
    try:
        return MarginSpec(
            top=float(data["top"]),
            bottom=float(data["bottom"]),
            left=float(data["left"]),
            right=float(data["right"]),
        )
    except (KeyError, TypeError, ValueError):
        return None


def _validate_pattern(pattern: str, label: str) -> None:
    try:
        re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"{label}: invalid pattern {pattern!r} ({exc})") from exc
