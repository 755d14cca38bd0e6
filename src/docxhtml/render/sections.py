"""Page sections - split the body on ``w:sectPr`` and derive page geometry."""

from __future__ import annotations

from typing import List, Optional, Sequence

from lxml import etree

from docxhtml.docx_parser.tree import BlockKind, classify_block, find_child, get_attr, get_int_attr
from docxhtml.ir import PageMargins, PageSection, PageSize, PageStyles
from docxhtml.utils import format_number, twips_to_pt

MARGIN_SIDES = ("top", "right", "bottom", "left")


def final_section_properties(body: etree._Element) -> Optional[etree._Element]:
    """The body-level ``w:sectPr`` describing the last section, if any."""
    return find_child(body, "w:sectPr")


def split_sections(
    body_children: Sequence[etree._Element],
    final_sectpr: Optional[etree._Element] = None,
) -> List[PageSection]:
    """Group body children into sections.

    A paragraph carrying ``w:pPr/w:sectPr`` closes the section it ends and is
    not rendered itself. The trailing children form the last section, which
    uses the body's own ``w:sectPr``.
    """
    sections: List[PageSection] = []
    current: List[etree._Element] = []

    for child in body_children:
        kind = classify_block(child)
        if kind is BlockKind.PARAGRAPH:
            sectpr = find_child(find_child(child, "w:pPr"), "w:sectPr")
            if sectpr is not None:
                sections.append(PageSection(children=current, section_properties=sectpr))
                current = []
                continue
        elif kind is BlockKind.SECTION_PROPERTIES:
            continue
        current.append(child)

    if current or not sections:
        sections.append(PageSection(children=current, section_properties=final_sectpr))
    return sections


def section_css(sectpr: Optional[etree._Element]) -> str:
    """Multi-column layout for a section container ("" for single column)."""
    cols = find_child(sectpr, "w:cols")
    num = get_int_attr(cols, "w:num")
    if num is None or num <= 1:
        return ""
    css = f"column-count: {num};"
    space = get_int_attr(cols, "w:space")
    if space is not None:
        css += f" column-gap: {format_number(twips_to_pt(space))}pt;"
    return css


def page_styles_from_sectpr(sectpr: Optional[etree._Element]) -> Optional[PageStyles]:
    """Page size and margins in points; None when the section has no geometry."""
    pg_sz = find_child(sectpr, "w:pgSz")
    pg_mar = find_child(sectpr, "w:pgMar")
    if pg_sz is None and pg_mar is None:
        return None

    size = PageSize()
    width = get_int_attr(pg_sz, "w:w")
    height = get_int_attr(pg_sz, "w:h")
    if width is not None:
        size.width = twips_to_pt(width)
    if height is not None:
        size.height = twips_to_pt(height)
    if get_attr(pg_sz, "w:orient") == "landscape":
        size.orientation = "landscape"

    margin = PageMargins()
    for side in MARGIN_SIDES:
        value = get_int_attr(pg_mar, f"w:{side}")
        if value is not None:
            setattr(margin, side, twips_to_pt(value))

    return PageStyles(size=size, margin=margin)


def format_page_css(styles: Optional[PageStyles]) -> Optional[str]:
    """``@page`` rule for the given geometry; None when there is nothing to say."""
    if styles is None:
        return None

    units = styles.units
    rules: List[str] = []
    size = styles.size
    if size.orientation == "landscape":
        rules.append("size: landscape;")
    elif size.width and size.height:
        rules.append(f"size: {format_number(size.width)}{units} {format_number(size.height)}{units};")

    for side in MARGIN_SIDES:
        value = getattr(styles.margin, side)
        if value is not None:
            rules.append(f"margin-{side}: {format_number(value)}{units};")

    if not rules:
        return None
    return f"@page {{ {' '.join(rules)} }}"
