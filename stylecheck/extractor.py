from __future__ import annotations

import io
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Union
from zipfile import BadZipFile, ZipFile

from docx import Document
from lxml import etree

from . import config, heuristics
from .formatting import (
    iter_paragraph_runs,
    resolve_ascii_font,
    resolve_paragraph_formatting,
    resolve_size,
    run_text,
)
from .models import (
    DocumentContent,
    DocumentFormatting,
    DocumentModel,
    DocumentStructure,
    Footnote,
    Heading,
    Margins,
    PageNumbering,
    Paragraph,
    ParagraphFormatting,
)
from .quotations import detect_quotations
from .style_reader import (
    NS,
    StyleDefinition,
    attr,
    attr_name,
    parse_int,
    parse_styles_xml,
    resolve_heading_style,
)

DOCUMENT_PART = "word/document.xml"
STYLES_PART = "word/styles.xml"
FOOTNOTES_PART = "word/footnotes.xml"

Source = Union[str, Path, bytes, BinaryIO]

_PARAGRAPH_XPATH = ".//w:p[not(ancestor::w:p)]"
_MARGIN_SIDES = ("top", "bottom", "left", "right")
_PAGE_FIELD_CODE = "PAGE"
_SEPARATOR_FOOTNOTE_TYPES = {"separator", "continuationSeparator", "continuationNotice"}
_ALIGNMENT_LABELS = {
    "left": "left",
    "start": "left",
    "center": "center",
    "right": "right",
    "end": "right",
}


@dataclass
class WarningEntry:
    rule: str
    reason: str
    part: str | None = None
    paragraph_index: int | None = None


@dataclass
class ValidationLogState:
    source_name: str
    start_time: datetime
    document_type: str | None = None
    style_guide_key: str | None = None
    warnings: list[WarningEntry] = field(default_factory=list)
    paragraph_count: int = 0
    footnote_count: int = 0
    heading_count: int = 0
    module_issue_counts: dict[str, int] = field(default_factory=dict)
    error: str | None = None
    elapsed_sec: float | None = None


@dataclass
class PackageParts:
    document: bytes
    styles: bytes | None = None
    footnotes: bytes | None = None


def extract_document(
    source: Source,
    log_state: ValidationLogState | None = None,
) -> DocumentModel:
    """Build the immutable document model from a .docx package.

    Only an unreadable package or a missing/unparseable main document part
    is fatal; every optional part and every paragraph degrades locally.
    """
    data, name = read_source(source)
    parts = read_package_parts(data, name)
    body = _parse_body(parts.document)
    styles = _parse_styles(parts.styles, log_state)

    paragraphs, headings, fonts_used, font_sizes_used, spacing_samples = _extract_paragraphs(
        body, styles, log_state
    )
    footnotes = _extract_footnotes(parts.footnotes, log_state)
    margins = _extract_margins(body, log_state)
    page_numbering = _extract_page_numbering(data, log_state)

    text = "\n\n".join(paragraph.text for paragraph in paragraphs)
    word_count = len(text.split())
    content = DocumentContent(
        text=text,
        paragraphs=tuple(paragraphs),
        footnotes=tuple(footnotes),
        headings=tuple(headings),
        quotations=detect_quotations(text),
    )
    formatting = DocumentFormatting(
        fonts_used=frozenset(fonts_used),
        font_sizes_used=frozenset(font_sizes_used),
        margins=margins,
        line_spacing_samples=tuple(spacing_samples),
        page_numbering=page_numbering,
    )
    structure = DocumentStructure(
        page_count_estimate=math.ceil(word_count / config.WORDS_PER_PAGE),
        word_count=word_count,
        has_table_of_contents=heuristics.has_table_of_contents(text),
        has_bibliography=heuristics.has_bibliography(text),
    )
    if log_state is not None:
        log_state.paragraph_count = len(paragraphs)
        log_state.footnote_count = len(footnotes)
        log_state.heading_count = len(headings)
    return DocumentModel(content=content, formatting=formatting, structure=structure)


def source_name(source: Source) -> str:
    if isinstance(source, (bytes, bytearray)):
        return "<bytes>"
    if isinstance(source, (str, Path)):
        return Path(source).name
    name = getattr(source, "name", None)
    if isinstance(name, str) and name:
        return Path(name).name
    return "<stream>"


def read_source(source: Source) -> tuple[bytes, str]:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source), source_name(source)
    if isinstance(source, (str, Path)):
        path = Path(source)
        _ensure_readable_file(path)
        return path.read_bytes(), path.name
    return source.read(), source_name(source)


def read_package_parts(data: bytes, name: str = "<bytes>") -> PackageParts:
    try:
        with ZipFile(io.BytesIO(data)) as archive:
            names = set(archive.namelist())
            if DOCUMENT_PART not in names:
                raise ValueError(f"missing required part in docx: {DOCUMENT_PART}")
            return PackageParts(
                document=archive.read(DOCUMENT_PART),
                styles=archive.read(STYLES_PART) if STYLES_PART in names else None,
                footnotes=archive.read(FOOTNOTES_PART) if FOOTNOTES_PART in names else None,
            )
    except BadZipFile as exc:
        raise ValueError(f"invalid docx package: {name}") from exc


def _ensure_readable_file(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"document not found: {path}")
    if not path.is_file():
        raise IsADirectoryError(f"document path is not a file: {path}")


def _parse_body(document_bytes: bytes) -> etree._Element:
    try:
        root = etree.fromstring(document_bytes)
    except etree.XMLSyntaxError as exc:
        raise ValueError(f"failed to parse {DOCUMENT_PART}: {exc}") from exc
    body = root.find("w:body", namespaces=NS)
    if body is None:
        raise ValueError(f"document body missing from {DOCUMENT_PART}")
    return body


def _parse_styles(
    styles_bytes: bytes | None,
    log_state: ValidationLogState | None,
) -> dict[str, StyleDefinition]:
    if not styles_bytes:
        return {}
    try:
        return parse_styles_xml(styles_bytes)
    except Exception as exc:
        _warn(log_state, rule="styles", reason=f"failed to parse styles.xml ({exc})", part=STYLES_PART)
        return {}


def _extract_paragraphs(
    body: etree._Element,
    styles: dict[str, StyleDefinition],
    log_state: ValidationLogState | None,
) -> tuple[list[Paragraph], list[Heading], set[str], set[float], list[float]]:
    paragraphs: list[Paragraph] = []
    headings: list[Heading] = []
    fonts_used: set[str] = set()
    font_sizes_used: set[float] = set()
    spacing_samples: list[float] = []

    for position, element in enumerate(body.xpath(_PARAGRAPH_XPATH, namespaces=NS), start=1):
        try:
            runs = iter_paragraph_runs(element)
            text = "".join(run_text(run) for run in runs)
            formatting = resolve_paragraph_formatting(element, runs)
            style_id = attr(element.find("w:pPr/w:pStyle", namespaces=NS), "val")
        except Exception as exc:
            _warn(log_state, rule="paragraph", reason=str(exc), paragraph_index=position)
            paragraphs.append(Paragraph(index=position, text="", is_empty=True))
            continue

        paragraph = Paragraph(
            index=position,
            text=text,
            is_empty=not text.strip(),
            formatting=formatting,
            style_id=style_id,
        )
        paragraphs.append(paragraph)

        for run in runs:
            font = resolve_ascii_font(run)
            if font:
                fonts_used.add(font)
            size = resolve_size(run)
            if size is not None:
                font_sizes_used.add(size)

        sample = _line_spacing_sample(formatting)
        if sample is not None:
            spacing_samples.append(sample)

        heading_style = resolve_heading_style(style_id, styles)
        if heading_style is not None and not paragraph.is_empty:
            headings.append(
                Heading(
                    index=position,
                    text=text.strip(),
                    level=heading_style.level,
                    style_id=heading_style.style_id,
                )
            )
    return paragraphs, headings, fonts_used, font_sizes_used, spacing_samples


def _line_spacing_sample(formatting: ParagraphFormatting) -> float | None:
    spacing = formatting.spacing
    if spacing is None or spacing.line is None or spacing.line <= 0:
        return None
    if spacing.line_rule not in (None, "auto"):
        return None
    return spacing.line / config.LINE_SPACING_UNITS


def _extract_footnotes(
    footnotes_bytes: bytes | None,
    log_state: ValidationLogState | None,
) -> list[Footnote]:
    if not footnotes_bytes:
        return []
    try:
        root = etree.fromstring(footnotes_bytes)
    except Exception as exc:
        _warn(
            log_state,
            rule="footnotes",
            reason=f"failed to parse footnotes.xml ({exc})",
            part=FOOTNOTES_PART,
        )
        return []

    footnotes: list[Footnote] = []
    for note in root.findall("w:footnote", namespaces=NS):
        footnote_id = attr(note, "id")
        if not footnote_id or footnote_id in config.RESERVED_FOOTNOTE_IDS:
            continue
        if attr(note, "type") in _SEPARATOR_FOOTNOTE_TYPES:
            continue
        try:
            footnotes.append(_build_footnote(note, footnote_id))
        except Exception as exc:
            _warn(
                log_state,
                rule="footnote",
                reason=f"footnote {footnote_id}: {exc}",
                part=FOOTNOTES_PART,
            )
            footnotes.append(Footnote(id=footnote_id, text=""))
    return footnotes


def _build_footnote(note: etree._Element, footnote_id: str) -> Footnote:
    texts: list[str] = []
    all_runs: list[etree._Element] = []
    first_paragraph: etree._Element | None = None
    for paragraph in note.findall("w:p", namespaces=NS):
        if first_paragraph is None:
            first_paragraph = paragraph
        runs = iter_paragraph_runs(paragraph)
        all_runs.extend(runs)
        text = "".join(run_text(run) for run in runs).strip()
        if text:
            texts.append(text)
    if first_paragraph is None:
        return Footnote(id=footnote_id, text="")
    return Footnote(
        id=footnote_id,
        text=" ".join(texts),
        formatting=resolve_paragraph_formatting(first_paragraph, all_runs),
    )


def _extract_margins(
    body: etree._Element,
    log_state: ValidationLogState | None,
) -> Margins | None:
    sect_pr = body.find("w:sectPr", namespaces=NS)
    if sect_pr is None:
        found = body.xpath(".//w:sectPr", namespaces=NS)
        sect_pr = found[-1] if found else None
    if sect_pr is None:
        return None
    pg_mar = sect_pr.find("w:pgMar", namespaces=NS)
    if pg_mar is None:
        return None
    values: dict[str, float | None] = {}
    for side in _MARGIN_SIDES:
        raw = attr(pg_mar, side)
        twips = parse_int(raw)
        if twips is None:
            if raw is not None:
                _warn(log_state, rule="margins", reason=f"unreadable {side} margin {raw!r}")
            values[side] = None
            continue
        values[side] = round(abs(twips) / config.TWIPS_PER_INCH, 2)
    return Margins(**values)


def _extract_page_numbering(data: bytes, log_state: ValidationLogState | None) -> PageNumbering:
    try:
        document = Document(io.BytesIO(data))
    except Exception as exc:
        _warn(log_state, rule="page_numbering", reason=f"failed to open package sections ({exc})")
        return PageNumbering()

    for section in document.sections:
        candidates = (
            ("bottom", (section.footer, section.first_page_footer, section.even_page_footer)),
            ("top", (section.header, section.first_page_header, section.even_page_header)),
        )
        for vertical, parts in candidates:
            for part in parts:
                try:
                    if part.is_linked_to_previous:
                        continue
                    location = _find_page_field(part._element, vertical)
                except Exception as exc:
                    _warn(log_state, rule="page_numbering", reason=f"{vertical} part: {exc}")
                    continue
                if location is not None:
                    return PageNumbering(present=True, location=location)
    return PageNumbering()


def _find_page_field(container: etree._Element, vertical: str) -> str | None:
    for paragraph in container.iter(attr_name("p")):
        if not _has_page_field(paragraph):
            continue
        alignment = attr(paragraph.find("w:pPr/w:jc", namespaces=NS), "val")
        horizontal = _ALIGNMENT_LABELS.get(alignment or "", alignment)
        return f"{vertical} {horizontal}" if horizontal else vertical
    return None


def _has_page_field(paragraph: etree._Element) -> bool:
    for field_elem in paragraph.iter(attr_name("fldSimple")):
        if _is_page_instruction(attr(field_elem, "instr")):
            return True
    for instr in paragraph.iter(attr_name("instrText")):
        if _is_page_instruction(instr.text):
            return True
    return False


def _is_page_instruction(instruction: str | None) -> bool:
    if not instruction:
        return False
    tokens = instruction.replace("\\", " ").split()
    return bool(tokens) and tokens[0].upper() == _PAGE_FIELD_CODE


def _warn(
    log_state: ValidationLogState | None,
    rule: str,
    reason: str,
    part: str | None = None,
    paragraph_index: int | None = None,
) -> None:
    if log_state is None:
        return
    log_state.warnings.append(
        WarningEntry(
            rule=rule,
            reason=reason,
            part=part,
            paragraph_index=paragraph_index,
        )
    )
