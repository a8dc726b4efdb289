from __future__ import annotations

from typing import Iterable

from lxml import etree

from .models import INHERITED, Explicit, Indentation, ParagraphFormatting, RunValue, Spacing
from .style_reader import NS, attr, attr_name, parse_int, parse_on_off

FONT_ATTRIBUTE_PRIORITY = ("ascii", "hAnsi", "cs", "eastAsia")

_RUN_XPATH = (
    "./w:r"
    " | ./w:hyperlink/w:r"
    " | ./w:ins/w:r"
    " | ./w:smartTag/w:r"
    " | ./w:fldSimple/w:r"
    " | ./w:customXml/w:r"
)
_TEXT_TAG = attr_name("t")
_TAB_TAG = attr_name("tab")
_BREAK_TAGS = {attr_name("br"), attr_name("cr")}


def iter_paragraph_runs(paragraph: etree._Element) -> list[etree._Element]:
    return paragraph.xpath(_RUN_XPATH, namespaces=NS)


def run_text(run: etree._Element) -> str:
    parts: list[str] = []
    for child in run:
        tag = child.tag
        if tag == _TEXT_TAG:
            if child.text:
                parts.append(child.text)
        elif tag == _TAB_TAG:
            parts.append("\t")
        elif tag in _BREAK_TAGS:
            parts.append("\n")
    return "".join(parts)


def paragraph_text(paragraph: etree._Element) -> str:
    return "".join(run_text(run) for run in iter_paragraph_runs(paragraph))


def resolve_font(run: etree._Element) -> str | None:
    """Return the first declared font in ascii, hAnsi, cs, eastAsia order."""
    r_fonts = run.find("w:rPr/w:rFonts", namespaces=NS)
    if r_fonts is None:
        return None
    for name in FONT_ATTRIBUTE_PRIORITY:
        value = attr(r_fonts, name)
        if value:
            return value
    return None


def resolve_ascii_font(run: etree._Element) -> str | None:
    return attr(run.find("w:rPr/w:rFonts", namespaces=NS), "ascii") or None


def resolve_size(run: etree._Element) -> float | None:
    half_points = parse_int(attr(run.find("w:rPr/w:sz", namespaces=NS), "val"))
    if half_points is None or half_points <= 0:
        return None
    return half_points / 2


def resolve_paragraph_formatting(
    paragraph: etree._Element,
    runs: Iterable[etree._Element] | None = None,
) -> ParagraphFormatting:
    p_pr = paragraph.find("w:pPr", namespaces=NS)
    alignment = None
    indentation = None
    spacing = None
    if p_pr is not None:
        alignment = attr(p_pr.find("w:jc", namespaces=NS), "val")
        indentation = _parse_indentation(p_pr.find("w:ind", namespaces=NS))
        spacing = _parse_spacing(p_pr.find("w:spacing", namespaces=NS))

    fonts: list[RunValue] = []
    font_sizes: list[RunValue] = []
    bold = False
    italic = False
    if runs is None:
        runs = iter_paragraph_runs(paragraph)
    for run in runs:
        if not run_text(run).strip():
            continue
        font = resolve_font(run)
        if font is None:
            fonts.append(INHERITED)
        elif Explicit(font) not in fonts:
            fonts.append(Explicit(font))
        size = resolve_size(run)
        if size is None:
            font_sizes.append(INHERITED)
        elif Explicit(size) not in font_sizes:
            font_sizes.append(Explicit(size))
        r_pr = run.find("w:rPr", namespaces=NS)
        if r_pr is None:
            continue
        bold_elem = r_pr.find("w:b", namespaces=NS)
        if bold_elem is not None and parse_on_off(bold_elem):
            bold = True
        italic_elem = r_pr.find("w:i", namespaces=NS)
        if italic_elem is not None and parse_on_off(italic_elem):
            italic = True

    return ParagraphFormatting(
        alignment=alignment,
        indentation=indentation,
        spacing=spacing,
        fonts=tuple(fonts),
        font_sizes=tuple(font_sizes),
        bold=bold,
        italic=italic,
    )


def _parse_indentation(ind: etree._Element | None) -> Indentation | None:
    if ind is None:
        return None
    return Indentation(
        left=parse_int(attr(ind, "left") or attr(ind, "start")),
        right=parse_int(attr(ind, "right") or attr(ind, "end")),
        first_line=parse_int(attr(ind, "firstLine")),
        hanging=parse_int(attr(ind, "hanging")),
    )


def _parse_spacing(spacing: etree._Element | None) -> Spacing | None:
    if spacing is None:
        return None
    return Spacing(
        before=parse_int(attr(spacing, "before")),
        after=parse_int(attr(spacing, "after")),
        line=parse_int(attr(spacing, "line")),
        line_rule=attr(spacing, "lineRule"),
    )
