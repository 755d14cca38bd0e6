"""Paragraph helpers - block tag selection, list membership and paragraph CSS."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Pattern, Sequence, Tuple

from lxml import etree

from docxhtml.docx_parser.tree import child_attr, find_child, get_attr, get_int_attr, qn
from docxhtml.ir import PropertySet, ResolvedStyle
from docxhtml.utils import eighths_to_pt, hex_color, pt, twips_to_pt

# Built-in heading styles keep this name whatever the UI language is.
_HEADING_NAME_RE = re.compile(r"^heading ([1-6])$", re.IGNORECASE)
_TITLE_RE = re.compile(r"title", re.IGNORECASE)
_QUOTE_RE = re.compile(r"quote", re.IGNORECASE)

JUSTIFICATION = {"left": "left", "center": "center", "right": "right", "both": "justify"}

# Wrap modes that let text flow around a floating image.
_FLOAT_WRAPS = ("wp:wrapSquare", "wp:wrapTight", "wp:wrapThrough")


@dataclass(frozen=True)
class NumberingReference:
    num_id: str
    level: int


def compile_heading_patterns(patterns: Sequence[str]) -> Tuple[Pattern, ...]:
    return tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)


def heading_level(
    style_id: Optional[str],
    style: Optional[ResolvedStyle],
    patterns: Sequence[Pattern],
) -> Optional[int]:
    """Heading level (1-6) for a paragraph style, or None if it is not a heading."""
    if not style_id:
        return None
    for pattern in patterns:
        match = pattern.match(style_id)
        if match:
            level = match.group(1) if match.groups() else None
            return min(max(int(level), 1), 6) if level and level.isdigit() else 1
    if style is not None and style.name:
        match = _HEADING_NAME_RE.match(style.name)
        if match:
            return int(match.group(1))
    return None


def block_tag(style_id: Optional[str], style: Optional[ResolvedStyle], patterns: Sequence[Pattern]) -> str:
    """HTML element for a non-list paragraph: hN, h1 for titles, blockquote, or p."""
    level = heading_level(style_id, style, patterns)
    if level is not None:
        return f"h{level}"
    if style_id and _TITLE_RE.search(style_id):
        return "h1"
    if style_id and _QUOTE_RE.search(style_id):
        return "blockquote"
    return "p"


def numbering_reference(ppr: Optional[etree._Element], style: Optional[ResolvedStyle]) -> Optional[NumberingReference]:
    """List membership from direct ``w:numPr``, falling back to the paragraph style's.

    ``numId`` 0 explicitly removes numbering; a missing ``ilvl`` means level 0.
    """
    direct = find_child(ppr, "w:numPr")
    inherited = style.paragraph.get("w:numPr") if style is not None else None
    if direct is None and inherited is None:
        return None

    num_id = child_attr(direct, "w:numId") or child_attr(inherited, "w:numId")
    if not num_id or num_id == "0":
        return None

    level = get_int_attr(find_child(direct, "w:ilvl"), "w:val")
    if level is None:
        level = get_int_attr(find_child(inherited, "w:ilvl"), "w:val")
    return NumberingReference(num_id=num_id, level=level or 0)


def has_bottom_border(ppr: Optional[etree._Element]) -> bool:
    return find_child(find_child(ppr, "w:pBdr"), "w:bottom") is not None


def contains_floated_image(paragraph: etree._Element) -> bool:
    for anchor in paragraph.iter(qn("wp:anchor")):
        if any(find_child(anchor, wrap) is not None for wrap in _FLOAT_WRAPS):
            return True
    return False


def paragraph_css(props: PropertySet, floats_image: bool = False) -> Dict[str, str]:
    """Map merged paragraph properties to CSS declarations."""
    css: Dict[str, str] = {}

    align = JUSTIFICATION.get(get_attr(props.get("w:jc"), "w:val") or "")
    if align:
        css["text-align"] = align

    spacing = props.get("w:spacing")
    before = get_int_attr(spacing, "w:before")
    if before is not None:
        css["margin-top"] = pt(twips_to_pt(before))
    after = get_int_attr(spacing, "w:after")
    if after is not None:
        css["margin-bottom"] = pt(twips_to_pt(after))

    ind = props.get("w:ind")
    left = get_int_attr(ind, "w:left")
    if left is None:
        left = get_int_attr(ind, "w:start")
    if left is not None:
        css["margin-left"] = pt(twips_to_pt(left))
    first_line = get_int_attr(ind, "w:firstLine")
    if first_line is not None:
        css["text-indent"] = pt(twips_to_pt(first_line))
    hanging = get_int_attr(ind, "w:hanging")
    if hanging is not None:
        css["padding-left"] = pt(twips_to_pt(hanging))
        css["text-indent"] = pt(-twips_to_pt(hanging))

    bottom = find_child(props.get("w:pBdr"), "w:bottom")
    size = get_int_attr(bottom, "w:sz")
    val = get_attr(bottom, "w:val")
    if size is not None and val and val not in ("none", "nil"):
        color = hex_color(get_attr(bottom, "w:color")) or "black"
        css["border-bottom"] = f"{pt(eighths_to_pt(size))} solid {color}"
        space = get_int_attr(bottom, "w:space")
        if space is not None:
            css["padding-bottom"] = pt(twips_to_pt(space))

    if floats_image:
        css["overflow"] = "auto"
    return css
