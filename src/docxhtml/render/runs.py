"""Run renderer - turn ``w:r`` runs into inline HTML with cascaded formatting."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from lxml import etree

from docxhtml.docx_parser.styles import StylesTable
from docxhtml.docx_parser.tree import (
    child_attr,
    children,
    find_child,
    get_attr,
    get_int_attr,
    get_text,
    is_on,
    local_name,
    qn,
)
from docxhtml.ir import PropertySet, ResolvedStyle
from docxhtml.render.media import MediaResolver
from docxhtml.utils import (
    NBSP,
    escape_attr,
    escape_text,
    half_points_to_pt,
    hex_color,
    pt,
    style_attr,
    twips_to_pt,
)

logger = logging.getLogger(__name__)

HYPERLINK_STYLE_ID = "Hyperlink"

HIGHLIGHT_COLORS = {
    "yellow": "#ffff00",
    "green": "#00ff00",
    "cyan": "#00ffff",
    "magenta": "#ff00ff",
    "blue": "#0000ff",
    "red": "#ff0000",
    "darkBlue": "#00008b",
    "darkCyan": "#008b8b",
    "darkMagenta": "#8b008b",
    "darkRed": "#8b0000",
    "darkYellow": "#b5a42e",
    "darkGray": "#a9a9a9",
    "lightGray": "#d3d3d3",
    "black": "#000000",
    "white": "#ffffff",
}

UNDERLINE_STYLES = {"double": "double", "wave": "wavy"}

# Containers whose runs render inline as if they were direct paragraph children.
_TRANSPARENT_CONTAINERS = {"ins", "smartTag", "fldSimple", "customXml"}

_XML_SPACE = qn("xml:space")


class RunRenderer:
    """Render runs and inline containers of a paragraph."""

    def __init__(self, styles: StylesTable, media: MediaResolver) -> None:
        self._styles = styles
        self._media = media

    def render_inline(self, container: etree._Element, paragraph_style: Optional[ResolvedStyle] = None) -> str:
        """Render the inline children of a paragraph (runs, links, content controls)."""
        parts: List[str] = []
        for child in children(container):
            tag = local_name(child)
            if tag == "r":
                parts.append(self.render(child, paragraph_style))
            elif tag == "hyperlink":
                parts.append(self.render_hyperlink(child, paragraph_style))
            elif tag == "sdt":
                sdt_content = find_child(child, "w:sdtContent")
                if sdt_content is not None:
                    parts.append(self.render_inline(sdt_content, paragraph_style))
            elif tag in _TRANSPARENT_CONTAINERS:
                parts.append(self.render_inline(child, paragraph_style))
        return "".join(parts)

    def render_hyperlink(self, hyperlink: etree._Element, paragraph_style: Optional[ResolvedStyle] = None) -> str:
        content = self.render_inline(hyperlink, paragraph_style)
        target = self._media.resolve_link(hyperlink)
        if target is None:
            return content
        if target.display_text:
            content = escape_text(target.display_text)
        href = escape_attr(target.href)
        if target.external:
            return f'<a href="{href}" target="_blank" rel="noopener">{content}</a>'
        return f'<a href="{href}">{content}</a>'

    def render(self, run: etree._Element, paragraph_style: Optional[ResolvedStyle] = None) -> str:
        """Render one ``w:r``.

        Drawings are delegated to the media resolver and are not wrapped in
        text formatting. Runs without visible text collapse to a single space
        (whitespace only) or to nothing.
        """
        drawing = _find_drawing(run)
        if drawing is not None:
            return self._media.render_drawing(drawing)

        text_html, has_text = self._run_text(run)
        if not has_text:
            return text_html

        direct = find_child(run, "w:rPr")
        char_style_id = child_attr(direct, "w:rStyle")
        merged = self.cascade(direct, paragraph_style)

        opening, closing = _wrap_tags(merged)
        css = self.run_css(merged, char_style_id)
        if css:
            opening.append(f"<span{style_attr(css)}>")
            closing.insert(0, "</span>")
        return "".join(opening) + text_html + "".join(closing)

    def cascade(self, direct: Optional[etree._Element], paragraph_style: Optional[ResolvedStyle] = None) -> PropertySet:
        """Merge run properties: defaults, paragraph style, linked style, character style, direct."""
        char_style = self._styles.get(child_attr(direct, "w:rStyle"))
        linked = self._styles.get(char_style.linked_style) if char_style is not None else None
        return PropertySet.merge(
            self._styles.defaults.run,
            paragraph_style.run if paragraph_style is not None else PropertySet(),
            linked.run if linked is not None else PropertySet(),
            char_style.run if char_style is not None else PropertySet(),
            PropertySet.from_element(direct),
        )

    def run_css(self, props: PropertySet, char_style_id: Optional[str] = None) -> Dict[str, str]:
        css: Dict[str, str] = {}

        decoration = _text_decoration(props)
        if decoration:
            css["text-decoration"] = decoration

        color = hex_color(get_attr(props.get("w:color"), "w:val"))
        if color:
            css["color"] = color

        fill = hex_color(get_attr(props.get("w:shd"), "w:fill"))
        if fill:
            css["background-color"] = fill

        highlight = HIGHLIGHT_COLORS.get(get_attr(props.get("w:highlight"), "w:val") or "")
        if highlight:
            css["background-color"] = highlight

        if char_style_id == HYPERLINK_STYLE_ID and "text-decoration" not in css:
            css["text-decoration"] = "underline"

        size = get_int_attr(props.get("w:sz"), "w:val")
        if size is not None:
            css["font-size"] = pt(half_points_to_pt(size))

        position = get_int_attr(props.get("w:position"), "w:val")
        if position is not None and position > 0:
            shift = half_points_to_pt(position)
            css["padding-bottom"] = pt(shift)
            css["display"] = "inline-block"
            css["transform"] = f"translateY({pt(-shift)})"

        if is_on(props.get("w:caps")):
            css["text-transform"] = "uppercase"
        if is_on(props.get("w:smallCaps")):
            css["font-variant"] = "small-caps"

        spacing = get_int_attr(props.get("w:spacing"), "w:val")
        if spacing is not None:
            css["letter-spacing"] = f"{twips_to_pt(spacing):.2f}pt"

        return css

    @staticmethod
    def _run_text(run: etree._Element) -> Tuple[str, bool]:
        """Return (escaped html, has visible content) for a run's text nodes."""
        parts: List[str] = []
        visible = False
        whitespace = False
        for child in children(run):
            tag = local_name(child)
            if tag == "t":
                raw = get_text(child)
                if raw.strip():
                    visible = True
                elif raw:
                    whitespace = True
                text = escape_text(raw)
                if child.get(_XML_SPACE) == "preserve":
                    text = _preserve_spaces(text)
                parts.append(text)
            elif tag in ("br", "cr"):
                parts.append("<br>")
                visible = True
            elif tag == "tab":
                parts.append("&emsp;")
                visible = True

        if not visible:
            return (" " if whitespace else ""), False
        return "".join(parts), True


def _find_drawing(run: etree._Element) -> Optional[etree._Element]:
    drawing = find_child(run, "w:drawing")
    if drawing is not None:
        return drawing
    for alternate in run.iter(qn("mc:AlternateContent")):
        choice = find_child(alternate, "mc:Choice")
        drawing = find_child(choice, "w:drawing")
        if drawing is not None:
            return drawing
        drawing = find_child(find_child(alternate, "mc:Fallback"), "w:drawing")
        if drawing is not None:
            return drawing
    return None


def _preserve_spaces(text: str) -> str:
    if text.startswith(" "):
        text = NBSP + text[1:]
    if text.endswith(" "):
        text = text[:-1] + NBSP
    return text.replace("  ", f"{NBSP} ")


def _wrap_tags(props: PropertySet) -> Tuple[List[str], List[str]]:
    opening: List[str] = []
    closing: List[str] = []

    def wrap(tag: str) -> None:
        opening.append(f"<{tag}>")
        closing.insert(0, f"</{tag}>")

    if is_on(props.get("w:b")):
        wrap("strong")
    if is_on(props.get("w:i")):
        wrap("em")

    vert_align = get_attr(props.get("w:vertAlign"), "w:val")
    if vert_align == "superscript":
        wrap("sup")
    elif vert_align == "subscript":
        wrap("sub")
    return opening, closing


def _text_decoration(props: PropertySet) -> str:
    lines: List[str] = []
    style = ""
    color = ""

    underline = props.get("w:u")
    value = get_attr(underline, "w:val")
    if value and value != "none":
        lines.append("underline")
        style = UNDERLINE_STYLES.get(value, "")
        color = hex_color(get_attr(underline, "w:color")) or ""

    strike = is_on(props.get("w:strike"))
    double_strike = is_on(props.get("w:dstrike"))
    if strike or double_strike:
        lines.append("line-through")
        if double_strike:
            style = "double"

    if not lines:
        return ""
    return " ".join(part for part in (" ".join(lines), style, color) if part)
