from __future__ import annotations

from . import heuristics
from .models import Category, DocumentModel, Heading, Issue, Location, Severity
from .style_guide import StyleGuide

_NUMBERING_RULES = {
    2: (Severity.MEDIUM, '"1.1 Heading Text"', "Number.Number Heading"),
    3: (Severity.MEDIUM, '"1.1.1 Heading Text"', "Number.Number.Number Heading"),
    4: (Severity.LOW, '"1.1.1.1 Heading Text" (italic)', "Number.Number.Number.Number Heading"),
}


def check(model: DocumentModel, document_type: str, style_guide: StyleGuide) -> list[Issue]:
    headings = model.content.headings
    if not headings:
        if document_type != "dissertation":
            return []
        return [
            Issue(
                category=Category.STRUCTURE,
                severity=Severity.HIGH,
                rule="Headings",
                message="Dissertation should have chapter headings",
                expected="Chapter headings present",
                found="No headings detected",
                location=Location(section="Document"),
                fix="Add chapter and section headings",
            )
        ]

    issues: list[Issue] = []
    previous_level = 0
    for heading in headings:
        issues.extend(_check_hierarchy(heading, previous_level, style_guide))
        issues.extend(_check_format(heading))
        if document_type == "dissertation" and heading.level == 1:
            if not heuristics.is_dissertation_chapter_format(heading.text):
                issues.append(
                    Issue(
                        category=Category.STRUCTURE,
                        severity=Severity.MEDIUM,
                        rule="Chapter Heading Format",
                        message='Dissertation chapter headings should include "CHAPTER" (optional) '
                        "followed by chapter title",
                        expected="1. CHAPTER ONE HEADING or 1. HEADING",
                        found=heading.text,
                        location=Location(paragraph=heading.index),
                    )
                )
        previous_level = heading.level
    return issues


def _check_hierarchy(heading: Heading, previous_level: int, style_guide: StyleGuide) -> list[Issue]:
    issues: list[Issue] = []
    location = Location(paragraph=heading.index, text=heading.text)
    if previous_level > 0 and heading.level > previous_level + 1:
        issues.append(
            Issue(
                category=Category.STRUCTURE,
                severity=Severity.MEDIUM,
                rule="Heading Hierarchy",
                message=f"Heading level skipped (went from {previous_level} to {heading.level})",
                expected=f"Level {previous_level + 1}",
                found=f"Level {heading.level}",
                location=location,
                fix="Use consecutive heading levels without skipping",
            )
        )
    max_depth = style_guide.max_heading_depth
    if heading.level > max_depth:
        issues.append(
            Issue(
                category=Category.STRUCTURE,
                severity=Severity.MEDIUM,
                rule="Heading Depth",
                message=f"Heading depth should not exceed {max_depth} levels",
                expected=f"Maximum level {max_depth}",
                found=f"Level {heading.level}",
                location=location,
                fix='Use "firstly", "secondly" etc. instead of deeper levels',
            )
        )
    return issues


def _check_format(heading: Heading) -> list[Issue]:
    location = Location(paragraph=heading.index)
    if heading.level == 1:
        issues: list[Issue] = []
        if not heuristics.is_all_caps(heading.text):
            issues.append(
                Issue(
                    category=Category.FORMATTING,
                    severity=Severity.HIGH,
                    rule="Level 1 Heading Format",
                    message="Level 1 headings must be in ALL CAPS",
                    expected=heading.text.upper(),
                    found=heading.text,
                    location=location,
                    fix="Change to ALL CAPS",
                )
            )
        if not heuristics.is_level_one_heading_format(heading.text):
            issues.append(
                Issue(
                    category=Category.FORMATTING,
                    severity=Severity.MEDIUM,
                    rule="Level 1 Heading Format",
                    message='Level 1 headings should follow format: "1. HEADING TEXT"',
                    expected="Number. HEADING",
                    found=heading.text,
                    location=location,
                )
            )
        return issues

    rule = _NUMBERING_RULES.get(heading.level)
    if rule is None or heuristics.matches_heading_numbering(heading.text, heading.level):
        return []
    severity, example, expected = rule
    return [
        Issue(
            category=Category.FORMATTING,
            severity=severity,
            rule=f"Level {heading.level} Heading Format",
            message=f"Level {heading.level} headings should follow format: {example}",
            expected=expected,
            found=heading.text,
            location=location,
        )
    ]
