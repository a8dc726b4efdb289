from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from lxml import etree

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
NS = {"w": W_NS}

_HEADING_KEYWORD = "heading"
_LEVEL_PATTERN = re.compile(r"\d+")


@dataclass(frozen=True)
class StyleDefinition:
    style_id: str
    name: str | None
    based_on: str | None
    style_type: str | None


@dataclass(frozen=True)
class HeadingStyle:
    style_id: str
    level: int


def parse_styles_xml(data: bytes) -> dict[str, StyleDefinition]:
    root = etree.fromstring(data)
    styles: dict[str, StyleDefinition] = {}
    for style in root.findall("w:style", namespaces=NS):
        style_id = style.get(attr_name("styleId"))
        if not style_id:
            continue
        name_elem = style.find("w:name", namespaces=NS)
        based_on_elem = style.find("w:basedOn", namespaces=NS)
        styles[style_id] = StyleDefinition(
            style_id=style_id,
            name=attr(name_elem, "val"),
            based_on=attr(based_on_elem, "val"),
            style_type=style.get(attr_name("type")),
        )
    return styles


def resolve_heading_style(
    style_id: str | None,
    styles: dict[str, StyleDefinition] | None = None,
) -> HeadingStyle | None:
    """Decide whether a paragraph style marks a heading and at which level.

    The identifier itself wins; the style's display name and then its
    ``basedOn`` ancestors are consulted only when a styles part is known.
    """
    if not style_id:
        return None
    if _HEADING_KEYWORD in style_id.lower():
        return HeadingStyle(style_id=style_id, level=_first_level(style_id) or 1)
    if not styles:
        return None
    for definition in _collect_style_chain(styles, style_id):
        for label in (definition.style_id, definition.name):
            if label and _HEADING_KEYWORD in label.lower():
                level = (
                    _first_level(definition.style_id)
                    or _first_level(definition.name)
                    or 1
                )
                return HeadingStyle(style_id=style_id, level=level)
    return None


def _collect_style_chain(
    styles: dict[str, StyleDefinition],
    style_id: str,
) -> Iterable[StyleDefinition]:
    visited: set[str] = set()
    chain: list[StyleDefinition] = []
    current_id: str | None = style_id
    while current_id is not None:
        if current_id in visited:
            break
        visited.add(current_id)
        current = styles.get(current_id)
        if current is None:
            break
        chain.append(current)
        current_id = current.based_on
    return chain


def _first_level(label: str | None) -> int | None:
    if not label:
        return None
    match = _LEVEL_PATTERN.search(label)
    if match is None:
        return None
    level = int(match.group(0))
    return level if level > 0 else None


def attr(elem: etree._Element | None, name: str) -> str | None:
    if elem is None:
        return None
    return elem.get(attr_name(name))


def attr_name(name: str) -> str:
    return f"{{{W_NS}}}{name}"


def parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_on_off(elem: etree._Element) -> bool:
    val = attr(elem, "val")
    if val is None:
        return True
    return val.lower() not in {"0", "false", "off", "none"}
