from __future__ import annotations

import re

from . import heuristics
from .models import Category, DocumentModel, Issue, Location, Severity
from .style_guide import StyleGuide


def check(model: DocumentModel, document_type: str, style_guide: StyleGuide) -> list[Issue]:
    issues: list[Issue] = []
    if document_type == "assignment":
        issues.extend(_check_assignment_cover(model, style_guide))
    elif document_type == "dissertation":
        issues.extend(_check_dissertation_preliminaries(model, style_guide))
    issues.extend(_check_bibliography(model, style_guide))
    issues.extend(_check_section_order(model, style_guide))
    return issues


def _issue(severity: Severity, rule: str, message: str, **details: object) -> Issue:
    return Issue(category=Category.STRUCTURE, severity=severity, rule=rule, message=message, **details)


def _check_assignment_cover(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    text = model.content.text
    issues: list[Issue] = []
    for element in style_guide.cover_elements:
        if element.matches(text):
            continue
        name = element.display_name
        issues.append(
            _issue(
                Severity.HIGH,
                "Cover Page Format",
                f"Cover page must include {name}",
                expected=f"{name} on cover page",
                found=f"{name} not found",
                location=Location(section="Cover Page"),
                fix=f"Add {name} to cover page as per sample format",
            )
        )

    if not re.search(style_guide.honesty_declaration_pattern, text, re.IGNORECASE):
        issues.append(
            _issue(
                Severity.CRITICAL,
                "Academic Honesty Declaration",
                "Cover page must include academic honesty declaration",
                expected=f'Declaration: "{style_guide.honesty_declaration_text}"',
                found="No declaration found",
                location=Location(section="Cover Page (bottom section)"),
                fix="Add required declaration on cover page above signature line",
            )
        )

    if not re.search(style_guide.signature_pattern, text, re.IGNORECASE):
        issues.append(
            _issue(
                Severity.MEDIUM,
                "Cover Page Format",
                "Cover page should include signature line",
                expected="Signature: _________________",
                found="No signature line found",
                location=Location(section="Cover Page"),
                fix='Add "Signature: _________________" after declaration',
            )
        )
    return issues


def _check_dissertation_preliminaries(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    issues: list[Issue] = []
    if not model.structure.has_table_of_contents:
        issues.append(
            _issue(
                Severity.HIGH,
                "Table of Contents",
                "Dissertation must include Table of Contents",
                expected="Table of Contents after Declaration page",
                found="No Table of Contents found",
                location=Location(section="Preliminary pages"),
                fix="Add Table of Contents",
            )
        )

    if not re.search(style_guide.declaration_page_pattern, model.content.text, re.IGNORECASE):
        issues.append(
            _issue(
                Severity.HIGH,
                "Declaration Page",
                "Dissertation must include Declaration page",
                expected="Declaration page with required statements",
                found="No Declaration page found",
                location=Location(section="Preliminary pages"),
                fix="Add Declaration page after Signatory page",
            )
        )

    chapters = [
        heading
        for heading in model.content.headings
        if heading.level == 1 and heuristics.is_chapter_heading(heading.text)
    ]
    if len(chapters) < style_guide.min_chapters:
        issues.append(
            _issue(
                Severity.MEDIUM,
                "Chapter Structure",
                "Dissertation should have at least Introduction + body chapters + Conclusion",
                expected=f"Minimum {style_guide.min_chapters} chapters",
                found=f"{len(chapters)} chapters detected",
                location=Location(section="Document structure"),
                fix="Ensure proper chapter division",
            )
        )
    return issues


def _check_bibliography(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    structure = model.structure
    if structure.has_bibliography or structure.word_count <= style_guide.structure_bibliography_min_words:
        return []
    return [
        _issue(
            Severity.HIGH,
            "Bibliography",
            "Document must include Bibliography section",
            expected="Bibliography at end of document",
            found="No Bibliography section found",
            location=Location(section="End of document"),
            fix="Add Bibliography section at the end",
        )
    ]


def _check_section_order(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    text = model.content.text
    issues: list[Issue] = []
    introduction = heuristics.keyword_offset(text, "introduction")
    bibliography = heuristics.keyword_offset(text, "bibliography")
    appendix = heuristics.keyword_offset(text, "appendix")

    if introduction > style_guide.introduction_max_offset:
        issues.append(
            _issue(
                Severity.LOW,
                "Document Organization",
                "Introduction should appear at the beginning of the document",
                expected="Introduction as first section",
                found="Introduction appears later in document",
                location=Location(section="Document structure"),
            )
        )

    if bibliography != -1 and bibliography < len(text) - style_guide.bibliography_end_distance:
        issues.append(
            _issue(
                Severity.MEDIUM,
                "Bibliography Placement",
                "Bibliography should be at the end of the document",
                expected="Bibliography as final section",
                found="Bibliography appears before end",
                location=Location(section="Bibliography"),
            )
        )

    if appendix != -1 and bibliography != -1 and appendix > bibliography:
        issues.append(
            _issue(
                Severity.MEDIUM,
                "Appendix Placement",
                "Appendices should come before Bibliography",
                expected="Order: Main text → Appendices → Bibliography",
                found="Appendix appears after Bibliography",
                location=Location(section="End matter"),
                fix="Move appendices before Bibliography",
            )
        )
    return issues
