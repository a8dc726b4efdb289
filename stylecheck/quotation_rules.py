from __future__ import annotations

from . import heuristics
from .models import Category, DocumentModel, Issue, Location, Severity, text_snippet
from .style_guide import StyleGuide

QUOTE_SNIPPET_CHARS = 80


def check(model: DocumentModel, document_type: str, style_guide: StyleGuide) -> list[Issue]:
    issues: list[Issue] = []
    for quotation in model.content.quotations:
        location = Location(text=text_snippet(quotation.text, QUOTE_SNIPPET_CHARS))
        if quotation.needs_block_format:
            issues.append(
                Issue(
                    category=Category.QUOTATIONS,
                    severity=Severity.HIGH,
                    rule="Block Quotation Format",
                    message="Quotations longer than 4 lines must be formatted as block quotes",
                    expected="Block quote format (11pt, indented, no quotation marks)",
                    found="Regular quotation with marks",
                    location=location,
                    fix="Remove quotation marks, indent, and change to 11pt font",
                )
            )
        if heuristics.uses_single_quote_marks(quotation.text):
            issues.append(
                Issue(
                    category=Category.QUOTATIONS,
                    severity=Severity.LOW,
                    rule="Quotation Marks",
                    message="Use double quotes for quotations, single quotes only for quotes within quotes",
                    expected='Double quotation marks ("...")',
                    found="Single quotation marks",
                    location=location,
                    fix="Change to double quotation marks",
                )
            )

    for paragraph in model.content.paragraphs:
        if paragraph.is_empty:
            continue
        if heuristics.has_spaced_footnote_marker(paragraph.text):
            issues.append(
                Issue(
                    category=Category.QUOTATIONS,
                    severity=Severity.MEDIUM,
                    rule="Footnote Placement",
                    message="Footnote number should immediately follow closing quotation mark (no space)",
                    expected='text"¹ or text."¹',
                    found='text" ¹ (space before footnote)',
                    location=Location(paragraph=paragraph.index),
                    fix="Remove space between quote and footnote number",
                )
            )
        # TODO: narrow once the style guide owner confirms which placements are wrong.
        if heuristics.has_punctuation_inside_quotes(paragraph.text):
            issues.append(
                Issue(
                    category=Category.QUOTATIONS,
                    severity=Severity.MEDIUM,
                    rule="Punctuation Placement",
                    message="Place periods and commas outside quotation marks",
                    expected='", or ".',
                    found='," or ."',
                    location=Location(paragraph=paragraph.index, text=paragraph.text[:100]),
                    fix="Move period/comma outside closing quote",
                )
            )
    return issues
