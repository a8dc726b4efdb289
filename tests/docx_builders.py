from __future__ import annotations

from pathlib import Path
from zipfile import ZipFile

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import parse_xml
from docx.oxml.ns import nsdecls
from docx.shared import Inches, Pt

from stylecheck.style_reader import W_NS


def new_document(
    margins: tuple[float, float, float, float] = (1, 1, 1, 1),
) -> Document:
    document = Document()
    section = document.sections[0]
    top, bottom, left, right = margins
    section.top_margin = Inches(top)
    section.bottom_margin = Inches(bottom)
    section.left_margin = Inches(left)
    section.right_margin = Inches(right)
    return document


def add_body_paragraph(
    document: Document,
    text: str,
    font: str | None = "Times New Roman",
    size: float | None = 12,
    line_spacing: float | None = 1.5,
):
    paragraph = document.add_paragraph()
    run = paragraph.add_run(text)
    if font is not None:
        run.font.name = font
    if size is not None:
        run.font.size = Pt(size)
    if line_spacing is not None:
        paragraph.paragraph_format.line_spacing = line_spacing
    return paragraph


def add_page_number_footer(document: Document, alignment=WD_ALIGN_PARAGRAPH.CENTER) -> None:
    footer = document.sections[0].footer
    paragraph = footer.paragraphs[0]
    if alignment is not None:
        paragraph.alignment = alignment
    paragraph._p.append(
        parse_xml(
            f'<w:fldSimple {nsdecls("w")} w:instr=" PAGE \\* MERGEFORMAT ">'
            f"<w:r><w:t>1</w:t></w:r>"
            f"</w:fldSimple>"
        )
    )


def save(document: Document, directory: str, name: str = "sample.docx") -> Path:
    path = Path(directory) / name
    document.save(str(path))
    return path


def footnotes_xml(notes: list[tuple[str, str]], font: str = "Times New Roman", half_points: int = 20) -> str:
    body = [
        f'<w:footnote w:type="separator" w:id="-1"><w:p><w:r><w:separator/></w:r></w:p></w:footnote>',
        f'<w:footnote w:type="continuationSeparator" w:id="0">'
        f"<w:p><w:r><w:continuationSeparator/></w:r></w:p></w:footnote>",
    ]
    for note_id, text in notes:
        body.append(
            f'<w:footnote w:id="{note_id}">'
            f"<w:p>"
            f'<w:pPr><w:pStyle w:val="FootnoteText"/></w:pPr>'
            f'<w:r><w:rPr><w:rStyle w:val="FootnoteReference"/></w:rPr><w:footnoteRef/></w:r>'
            f"<w:r>"
            f'<w:rPr><w:rFonts w:ascii="{font}" w:hAnsi="{font}"/><w:sz w:val="{half_points}"/></w:rPr>'
            f'<w:t xml:space="preserve"> {text}</w:t>'
            f"</w:r>"
            f"</w:p>"
            f"</w:footnote>"
        )
    return (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:footnotes xmlns:w="{W_NS}">' + "".join(body) + "</w:footnotes>"
    )


def patch_parts(path: Path, parts: dict[str, bytes | str | None]) -> None:
    """Rewrite package parts in place; a ``None`` value drops the part."""
    with ZipFile(path) as archive:
        data = {name: archive.read(name) for name in archive.namelist()}
    for name, content in parts.items():
        if content is None:
            data.pop(name, None)
        elif isinstance(content, str):
            data[name] = content.encode("utf-8")
        else:
            data[name] = content
    with ZipFile(path, "w") as archive:
        for name, content in data.items():
            archive.writestr(name, content)
