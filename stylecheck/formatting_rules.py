from __future__ import annotations


from . import heuristics
from .models import (
    Category,
    DocumentModel,
    Issue,
    Location,
    Severity,
    explicit_values,
    format_number,
    text_snippet,
)
from .style_guide import StyleGuide

PARAGRAPH_SNIPPET_CHARS = 80
FOOTNOTE_SNIPPET_CHARS = 100
_LEFT_ALIGNMENTS = {"left", "start"}


def check(model: DocumentModel, document_type: str, style_guide: StyleGuide) -> list[Issue]:
    issues: list[Issue] = []
    issues.extend(_check_document_fonts(model, style_guide))
    issues.extend(_check_document_sizes(model, style_guide))
    issues.extend(_check_margins(model, document_type, style_guide))
    issues.extend(_check_line_spacing(model, style_guide))
    issues.extend(_check_paragraphs(model, style_guide))
    issues.extend(_check_footnotes(model, style_guide))
    issues.extend(_check_page_numbering(model, style_guide))
    return issues


def _issue(
    severity: Severity,
    rule: str,
    message: str,
    expected: str | None = None,
    found: str | None = None,
    location: Location | None = None,
    fix: str | None = None,
) -> Issue:
    return Issue(
        category=Category.FORMATTING,
        severity=severity,
        rule=rule,
        message=message,
        expected=expected,
        found=found,
        location=location,
        fix=fix,
    )


def _check_document_fonts(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    fonts = sorted(model.formatting.fonts_used)
    # No explicit run font anywhere: the effective font cannot be determined.
    if not fonts:
        return []
    issues: list[Issue] = []
    required = style_guide.required_font
    found = ", ".join(fonts)
    if required not in fonts:
        issues.append(
            _issue(
                Severity.CRITICAL,
                "Font Style",
                f'Font must be "{required}". Found: {found}',
                expected=required,
                found=found,
                location=Location(section="Document"),
                fix=f"Change all text to {required}",
            )
        )
    if len(fonts) > style_guide.max_document_fonts:
        issues.append(
            _issue(
                Severity.MEDIUM,
                "Font Consistency",
                f'Multiple fonts used: {found}. Should use primarily "{required}"',
                expected=f"Primarily {required}",
                found=f"{len(fonts)} different fonts",
                location=Location(section="Document"),
            )
        )
    return issues


def _check_document_sizes(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    sizes = sorted(model.formatting.font_sizes_used)
    if not sizes:
        return []
    low, high = style_guide.body_size_range
    body_sizes = [size for size in sizes if low <= size <= high]
    required = style_guide.required_font_size
    if required in body_sizes:
        return []
    found = ", ".join(format_number(size) for size in body_sizes) or "Unknown"
    return [
        _issue(
            Severity.CRITICAL,
            "Font Size",
            f"Main text must be {format_number(required)}pt. Found: {found}",
            expected=f"{format_number(required)}pt",
            found=f"{found}pt",
            location=Location(section="Document"),
            fix=f"Change main text to {format_number(required)}pt",
        )
    ]


def _check_margins(
    model: DocumentModel,
    document_type: str,
    style_guide: StyleGuide,
) -> list[Issue]:
    margins = model.formatting.margins
    if margins is None:
        return []
    required = style_guide.margins_for(document_type)
    issues: list[Issue] = []
    for side in ("top", "bottom", "left", "right"):
        actual = margins.get(side)
        if actual is None:
            continue
        expected = required.get(side)
        # Rounded so that a difference of exactly the tolerance is accepted.
        if round(abs(actual - expected), 2) <= style_guide.margin_tolerance:
            continue
        plural = "" if expected == 1 else "es"
        issues.append(
            _issue(
                Severity.CRITICAL,
                "Page Margins",
                f'{side.capitalize()} margin must be {format_number(expected)}" '
                f'(found {format_number(actual)}")',
                expected=f'{format_number(expected)}"',
                found=f'{format_number(actual)}"',
                location=Location(section="Page Setup"),
                fix=f"Set {side} margin to {format_number(expected)} inch{plural}",
            )
        )
    return issues


def main_line_spacing(samples: tuple[float, ...]) -> float | None:
    """The first explicitly spaced paragraph stands for the main text."""
    if not samples:
        return None
    return round(samples[0], 1)


def _check_line_spacing(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    main_spacing = main_line_spacing(model.formatting.line_spacing_samples)
    if main_spacing is None:
        return []
    required = style_guide.required_line_spacing
    if round(abs(main_spacing - required), 2) <= style_guide.line_spacing_tolerance:
        return []
    return [
        _issue(
            Severity.HIGH,
            "Line Spacing",
            f"Main text spacing must be {format_number(required)} "
            f"(found {format_number(main_spacing)})",
            expected=format_number(required),
            found=format_number(main_spacing),
            location=Location(section="Document"),
            fix=f"Set line spacing to {format_number(required)}",
        )
    ]


def _check_paragraphs(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    issues: list[Issue] = []
    required_font = style_guide.required_font
    required_size = style_guide.required_font_size
    accepted_fonts = {required_font, *style_guide.allowed_fonts}
    accepted_sizes = {required_size, *style_guide.allowed_body_sizes}
    indentation_reported = False

    for paragraph in model.content.paragraphs:
        if paragraph.is_empty:
            continue
        formatting = paragraph.formatting
        location = Location(
            paragraph=paragraph.index,
            text=text_snippet(paragraph.text, PARAGRAPH_SNIPPET_CHARS),
        )

        wrong_fonts = [font for font in explicit_values(formatting.fonts) if font not in accepted_fonts]
        if wrong_fonts:
            found = ", ".join(str(font) for font in wrong_fonts)
            issues.append(
                _issue(
                    Severity.CRITICAL,
                    "Font Style",
                    f'Paragraph {paragraph.index} uses incorrect font: {found}. '
                    f'Must be "{required_font}"',
                    expected=required_font,
                    found=found,
                    location=location,
                    fix=f"Change text to {required_font}",
                )
            )

        wrong_sizes = [size for size in explicit_values(formatting.font_sizes) if size not in accepted_sizes]
        if wrong_sizes:
            found = ", ".join(format_number(size) for size in wrong_sizes)
            issues.append(
                _issue(
                    Severity.CRITICAL,
                    "Font Size",
                    f"Paragraph {paragraph.index} uses incorrect font size: {found}pt. "
                    f"Must be {format_number(required_size)}pt",
                    expected=f"{format_number(required_size)}pt",
                    found=f"{found}pt",
                    location=location,
                    fix=f"Change text size to {format_number(required_size)}pt",
                )
            )

        indentation = formatting.indentation
        if not indentation_reported and indentation is not None and indentation.first_line:
            indentation_reported = True
            issues.append(
                _issue(
                    Severity.MEDIUM,
                    "Paragraph Indentation",
                    "Paragraphs should be flush with left margin (no first-line indent)",
                    expected="No indentation",
                    found="First-line indentation present",
                    location=location,
                    fix="Remove first-line indentation and add line space between paragraphs",
                )
            )

        alignment = formatting.alignment
        if alignment and alignment not in _LEFT_ALIGNMENTS:
            if heuristics.is_cover_page_paragraph(
                paragraph,
                style_guide.cover_page_keywords,
                style_guide.cover_page_paragraph_limit,
                style_guide.cover_page_max_chars,
            ):
                continue
            issues.append(
                _issue(
                    Severity.LOW,
                    "Text Alignment",
                    f"Text should be left-aligned (found {alignment})",
                    expected="Left alignment",
                    found=alignment,
                    location=location,
                )
            )
    return issues


def _check_footnotes(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    issues: list[Issue] = []
    required_font = style_guide.required_font
    required_size = style_guide.footnote_font_size
    accepted_fonts = {required_font, *style_guide.footnote_allowed_fonts}

    for footnote in model.content.footnotes:
        if not footnote.text:
            continue
        location = Location(
            footnote=footnote.id,
            text=text_snippet(footnote.text, FOOTNOTE_SNIPPET_CHARS),
        )
        wrong_fonts = [
            font for font in explicit_values(footnote.formatting.fonts) if font not in accepted_fonts
        ]
        if wrong_fonts:
            found = ", ".join(str(font) for font in wrong_fonts)
            issues.append(
                _issue(
                    Severity.HIGH,
                    "Footnote Font",
                    f'Footnote {footnote.id} uses incorrect font: {found}. Must be "{required_font}"',
                    expected=required_font,
                    found=found,
                    location=location,
                    fix=f"Change footnote font to {required_font}",
                )
            )

        wrong_sizes = [
            size for size in explicit_values(footnote.formatting.font_sizes) if size != required_size
        ]
        if wrong_sizes:
            found = ", ".join(format_number(size) for size in wrong_sizes)
            issues.append(
                _issue(
                    Severity.HIGH,
                    "Footnote Size",
                    f"Footnote {footnote.id} uses incorrect font size: {found}pt. "
                    f"Must be {format_number(required_size)}pt",
                    expected=f"{format_number(required_size)}pt",
                    found=f"{found}pt",
                    location=location,
                    fix=f"Change footnote size to {format_number(required_size)}pt",
                )
            )

        if len(footnote.text) > style_guide.footnote_max_chars:
            issues.append(
                _issue(
                    Severity.LOW,
                    "Footnote Length",
                    f"Footnote {footnote.id} is very long. Check formatting.",
                    expected="Concise footnote",
                    found=f"{len(footnote.text)} characters",
                    location=location,
                )
            )
    return issues


def _check_page_numbering(model: DocumentModel, style_guide: StyleGuide) -> list[Issue]:
    numbering = model.formatting.page_numbering
    expected_location = style_guide.page_number_location
    if not numbering.present:
        if model.structure.page_count_estimate <= 1:
            return []
        return [
            _issue(
                Severity.MEDIUM,
                "Page Numbering",
                f"Page numbers should be at {expected_location}",
                expected=f"Page numbers at {expected_location}",
                found="No page numbers detected",
                location=Location(section="Page Setup"),
                fix=f"Add page numbers at {expected_location}",
            )
        ]
    if numbering.location is None or not _location_differs(numbering.location, expected_location):
        return []
    return [
        _issue(
            Severity.LOW,
            "Page Number Position",
            f"Page numbers should be at {expected_location} (found {numbering.location})",
            expected=expected_location,
            found=numbering.location,
            location=Location(section="Page Setup"),
            fix=f"Move page numbers to {expected_location}",
        )
    ]


def _location_differs(found: str, expected: str) -> bool:
    found_parts = found.split()
    expected_parts = expected.split()
    if found_parts[0] != expected_parts[0]:
        return True
    # An undeclared alignment is left to the footer style and is not judged.
    if len(found_parts) < 2 or len(expected_parts) < 2:
        return False
    return found_parts[1] != expected_parts[1]
