from __future__ import annotations

from . import heuristics
from .models import Category, DocumentModel, Issue, Location, Paragraph, Severity, text_snippet
from .style_guide import StyleGuide

FOOTNOTE_SNIPPET_CHARS = 100
ENTRY_SNIPPET_CHARS = 80


def check(model: DocumentModel, document_type: str, style_guide: StyleGuide) -> list[Issue]:
    issues: list[Issue] = []
    issues.extend(_check_footnotes(model, style_guide))
    issues.extend(_check_quotation_citations(model))
    issues.extend(_check_bibliography_presence(model, style_guide))
    issues.extend(_check_scripture_references(model, style_guide))
    issues.extend(_check_bibliography_order(model))
    return issues


def _issue(severity: Severity, rule: str, message: str, **details: object) -> Issue:
    return Issue(category=Category.CITATIONS, severity=severity, rule=rule, message=message, **details)


def _check_footnotes(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    issues: list[Issue] = []
    for footnote in model.content.footnotes:
        snippet = text_snippet(footnote.text, FOOTNOTE_SNIPPET_CHARS)
        location = Location(footnote=footnote.id, text=snippet)

        for abbreviation in style_guide.latin_abbreviations:
            for _ in abbreviation.finditer(footnote.text):
                issues.append(
                    _issue(
                        Severity.HIGH,
                        "Latin Abbreviations",
                        f'Do not use "{abbreviation.term}" in citations. '
                        f"Use {abbreviation.replacement} instead.",
                        expected=abbreviation.replacement,
                        found=abbreviation.term,
                        location=location,
                        fix=f'Replace "{abbreviation.term}" with {abbreviation.replacement}',
                    )
                )

        if heuristics.has_page_range_suffix(footnote.text):
            issues.append(
                _issue(
                    Severity.HIGH,
                    "Page References",
                    'Use exact page ranges instead of "f." or "ff."',
                    expected="Exact page numbers (e.g., 45-47)",
                    found="f. or ff. notation",
                    location=location,
                    fix="Replace with exact page range",
                )
            )

        if heuristics.is_undated_informal_web_source(
            footnote.text,
            style_guide.informal_source_pattern,
            style_guide.access_date_pattern,
        ):
            issues.append(
                _issue(
                    Severity.MEDIUM,
                    "Web Citations",
                    "Informal online sources should include access date",
                    expected='Include "accessed [date]" before URL',
                    found="URL without access date",
                    location=Location(footnote=footnote.id),
                    fix="Add access date before URL",
                )
            )
    return issues


def _check_quotation_citations(model: DocumentModel) -> list[Issue]:
    text = model.content.text
    issues: list[Issue] = []
    for quotation in model.content.quotations:
        # The span includes both quote marks around the quoted text.
        end = quotation.start_offset + len(quotation.text) + 2
        if heuristics.has_citation_marker(text, quotation.start_offset, end):
            continue
        issues.append(
            _issue(
                Severity.CRITICAL,
                "Missing Citations",
                "Quotation appears to lack a citation",
                expected="Footnote number after quotation",
                found="No footnote indicator found",
                location=Location(text=quotation.text[:FOOTNOTE_SNIPPET_CHARS]),
                fix="Add footnote citation",
            )
        )
    return issues


def _check_bibliography_presence(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    structure = model.structure
    if structure.has_bibliography or structure.word_count <= style_guide.citation_bibliography_min_words:
        return []
    return [
        _issue(
            Severity.HIGH,
            "Bibliography",
            "Document should include a Bibliography section",
            expected="Bibliography at end of document",
            found="No Bibliography section detected",
            location=Location(section="End of document"),
            fix="Add Bibliography section at the end",
        )
    ]


def _check_scripture_references(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    pattern = heuristics.build_scripture_footnote_pattern(style_guide.scripture_books)
    issues: list[Issue] = []
    for paragraph in model.content.paragraphs:
        if paragraph.is_empty or not heuristics.has_scripture_footnote(paragraph.text, pattern):
            continue
        issues.append(
            _issue(
                Severity.LOW,
                "Scripture Citations",
                "Scripture references should not have footnotes",
                expected="Scripture reference without footnote",
                found="Footnote after scripture",
                location=Location(paragraph=paragraph.index, text=paragraph.text[:100]),
                fix="Remove footnote from scripture reference",
            )
        )
    return issues


def bibliography_entries(paragraphs: tuple[Paragraph, ...]) -> list[Paragraph]:
    start = None
    for position, paragraph in enumerate(paragraphs):
        if heuristics.is_bibliography_heading(paragraph.text):
            start = position
            break
    if start is None:
        return []
    return [
        paragraph
        for paragraph in paragraphs[start + 1 :]
        if not paragraph.is_empty and heuristics.is_bibliography_entry(paragraph.text)
    ]


def _check_bibliography_order(model: DocumentModel) -> list[Issue]:
    entries = bibliography_entries(model.content.paragraphs)
    issues: list[Issue] = []
    for previous, current in zip(entries, entries[1:]):
        previous_key = heuristics.bibliography_sort_key(previous.text)
        current_key = heuristics.bibliography_sort_key(current.text)
        if previous_key <= current_key:
            continue
        issues.append(
            _issue(
                Severity.HIGH,
                "Bibliography Order",
                "Bibliography entries not in alphabetical order",
                expected=f'"{current_key}" should come before "{previous_key}"',
                found=f'"{previous_key}" appears before "{current_key}"',
                location=Location(
                    paragraph=current.index,
                    text=text_snippet(current.text.strip(), ENTRY_SNIPPET_CHARS),
                ),
                fix="Arrange bibliography entries alphabetically by author surname",
            )
        )
    return issues
