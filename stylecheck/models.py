from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Union

from . import config


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return SEVERITY_ORDER[self]


SEVERITY_ORDER = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


class Category(str, Enum):
    FORMATTING = "Formatting"
    CITATIONS = "Citations"
    STRUCTURE = "Structure"
    QUOTATIONS = "Quotations"


@dataclass(frozen=True)
class Explicit:
    """A run property that the run declares itself."""

    value: object


@dataclass(frozen=True)
class Inherited:
    """A run property left to the style chain; its effective value is unknown here."""

    def __repr__(self) -> str:
        return "INHERITED"


INHERITED = Inherited()
RunValue = Union[Explicit, Inherited]


def explicit_values(values: Iterable[RunValue]) -> list[object]:
    return [value.value for value in values if isinstance(value, Explicit)]


@dataclass(frozen=True)
class Indentation:
    left: int | None = None
    right: int | None = None
    first_line: int | None = None
    hanging: int | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "left": self.left,
            "right": self.right,
            "firstLine": self.first_line,
            "hanging": self.hanging,
        }


@dataclass(frozen=True)
class Spacing:
    before: int | None = None
    after: int | None = None
    line: int | None = None
    line_rule: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "before": self.before,
            "after": self.after,
            "line": self.line,
            "lineRule": self.line_rule,
        }


@dataclass(frozen=True)
class ParagraphFormatting:
    alignment: str | None = None
    indentation: Indentation | None = None
    spacing: Spacing | None = None
    fonts: tuple[RunValue, ...] = ()
    font_sizes: tuple[RunValue, ...] = ()
    bold: bool = False
    italic: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "alignment": self.alignment,
            "indentation": self.indentation.to_dict() if self.indentation else None,
            "spacing": self.spacing.to_dict() if self.spacing else None,
            "fonts": [_render_run_value(value, config.INHERITED_FONT_TOKEN) for value in self.fonts],
            "fontSizes": [
                _render_run_value(value, config.INHERITED_SIZE_TOKEN) for value in self.font_sizes
            ],
            "bold": self.bold,
            "italic": self.italic,
        }


@dataclass(frozen=True)
class Paragraph:
    index: int
    text: str
    is_empty: bool
    formatting: ParagraphFormatting = field(default_factory=ParagraphFormatting)
    style_id: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "text": self.text,
            "isEmpty": self.is_empty,
            "styleId": self.style_id,
            "formatting": self.formatting.to_dict(),
        }


@dataclass(frozen=True)
class Footnote:
    id: str
    text: str
    formatting: ParagraphFormatting = field(default_factory=ParagraphFormatting)

    def to_dict(self) -> dict[str, object]:
        return {"id": self.id, "text": self.text, "formatting": self.formatting.to_dict()}


@dataclass(frozen=True)
class Heading:
    index: int
    text: str
    level: int
    style_id: str

    def to_dict(self) -> dict[str, object]:
        return {"index": self.index, "text": self.text, "level": self.level, "styleId": self.style_id}


@dataclass(frozen=True)
class Quotation:
    text: str
    start_offset: int
    line_count: int
    needs_block_format: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "text": self.text,
            "startOffset": self.start_offset,
            "lineCount": self.line_count,
            "needsBlockFormat": self.needs_block_format,
        }


@dataclass(frozen=True)
class Margins:
    top: float | None = None
    bottom: float | None = None
    left: float | None = None
    right: float | None = None

    def get(self, side: str) -> float | None:
        return getattr(self, side)

    def to_dict(self) -> dict[str, float | None]:
        return {"top": self.top, "bottom": self.bottom, "left": self.left, "right": self.right}


@dataclass(frozen=True)
class PageNumbering:
    present: bool = False
    location: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {"present": self.present, "location": self.location}


@dataclass(frozen=True)
class DocumentContent:
    text: str = ""
    paragraphs: tuple[Paragraph, ...] = ()
    footnotes: tuple[Footnote, ...] = ()
    headings: tuple[Heading, ...] = ()
    quotations: tuple[Quotation, ...] = ()


@dataclass(frozen=True)
class DocumentFormatting:
    fonts_used: frozenset[str] = frozenset()
    font_sizes_used: frozenset[float] = frozenset()
    margins: Margins | None = None
    line_spacing_samples: tuple[float, ...] = ()
    page_numbering: PageNumbering = field(default_factory=PageNumbering)


@dataclass(frozen=True)
class DocumentStructure:
    page_count_estimate: int = 0
    word_count: int = 0
    has_table_of_contents: bool = False
    has_bibliography: bool = False


@dataclass(frozen=True)
class DocumentModel:
    content: DocumentContent = field(default_factory=DocumentContent)
    formatting: DocumentFormatting = field(default_factory=DocumentFormatting)
    structure: DocumentStructure = field(default_factory=DocumentStructure)

    def to_dict(self) -> dict[str, object]:
        content = self.content
        formatting = self.formatting
        structure = self.structure
        return {
            "content": {
                "text": content.text,
                "paragraphs": [paragraph.to_dict() for paragraph in content.paragraphs],
                "footnotes": [footnote.to_dict() for footnote in content.footnotes],
                "headings": [heading.to_dict() for heading in content.headings],
                "quotations": [quotation.to_dict() for quotation in content.quotations],
            },
            "formatting": {
                "fontsUsed": sorted(formatting.fonts_used),
                "fontSizesUsed": sorted(formatting.font_sizes_used),
                "margins": formatting.margins.to_dict() if formatting.margins else None,
                "lineSpacingSamples": list(formatting.line_spacing_samples),
                "pageNumbering": formatting.page_numbering.to_dict(),
            },
            "structure": {
                "pageCountEstimate": structure.page_count_estimate,
                "wordCount": structure.word_count,
                "hasTableOfContents": structure.has_table_of_contents,
                "hasBibliography": structure.has_bibliography,
            },
        }


@dataclass(frozen=True)
class Location:
    paragraph: int | None = None
    footnote: str | None = None
    section: str | None = None
    text: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {}
        if self.paragraph is not None:
            data["paragraph"] = self.paragraph
        if self.footnote is not None:
            data["footnote"] = self.footnote
        if self.section is not None:
            data["section"] = self.section
        if self.text is not None:
            data["text"] = self.text
        return data


@dataclass(frozen=True)
class Issue:
    category: Category
    severity: Severity
    rule: str
    message: str
    expected: str | None = None
    found: str | None = None
    location: Location | None = None
    fix: str | None = None

    @property
    def paragraph_index(self) -> int:
        if self.location is None or self.location.paragraph is None:
            return 0
        return self.location.paragraph

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "category": self.category.value,
            "severity": self.severity.value,
            "rule": self.rule,
            "message": self.message,
        }
        if self.expected is not None:
            data["expected"] = self.expected
        if self.found is not None:
            data["found"] = self.found
        if self.location is not None:
            data["location"] = self.location.to_dict()
        if self.fix is not None:
            data["fix"] = self.fix
        return data


@dataclass(frozen=True)
class Summary:
    total_issues: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @classmethod
    def from_issues(cls, issues: Iterable[Issue]) -> "Summary":
        counts = {severity: 0 for severity in Severity}
        total = 0
        for issue in issues:
            counts[issue.severity] += 1
            total += 1
        return cls(
            total_issues=total,
            critical=counts[Severity.CRITICAL],
            high=counts[Severity.HIGH],
            medium=counts[Severity.MEDIUM],
            low=counts[Severity.LOW],
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "totalIssues": self.total_issues,
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
        }


@dataclass(frozen=True)
class Report:
    document_type: str
    file_name: str
    summary: Summary
    issues: tuple[Issue, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "documentType": self.document_type,
            "fileName": self.file_name,
            "summary": self.summary.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)


def text_snippet(text: str, limit: int) -> str:
    snippet = text[:limit].strip()
    if len(text) > limit:
        return snippet + "..."
    return snippet


def format_number(value: float) -> str:
    return f"{value:g}"


def _render_run_value(value: RunValue, inherited_token: object) -> object:
    if isinstance(value, Explicit):
        return value.value
    return inherited_token
