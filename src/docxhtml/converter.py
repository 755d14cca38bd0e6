"""DOCX to HTML conversion pipeline.

``DocxToHtmlConverter.create`` opens the package and loads the lookup tables
(relationships, numbering, styles); ``convert`` splits the body into page
sections and walks each one, producing an HTML fragment plus the page
geometry of the final section.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Sequence, TypeVar

from lxml import etree

from docxhtml.docx_parser.numbering import NumberingTable, parse_numbering
from docxhtml.docx_parser.package import (
    DOCUMENT_PART,
    NUMBERING_PART,
    RELATIONSHIPS_PART,
    STYLES_PART,
    DocxPackage,
)
from docxhtml.docx_parser.relationships import parse_relationships
from docxhtml.docx_parser.styles import StylesTable, parse_styles
from docxhtml.docx_parser.tree import BlockKind, child_attr, classify_block, children, find_child, is_tag, parse_xml
from docxhtml.errors import InputError, StructureError
from docxhtml.ir import ConvertOptions, ConvertResult, PropertySet
from docxhtml.render.lists import ListRenderState
from docxhtml.render.media import MediaResolver
from docxhtml.render.paragraphs import (
    block_tag,
    compile_heading_patterns,
    contains_floated_image,
    has_bottom_border,
    numbering_reference,
    paragraph_css,
)
from docxhtml.render.runs import RunRenderer
from docxhtml.render.sections import (
    final_section_properties,
    format_page_css,
    page_styles_from_sectpr,
    section_css,
    split_sections,
)
from docxhtml.render.tables import TableRenderer
from docxhtml.utils import NBSP, escape_text, is_blank, style_attr

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Empty paragraphs and headings collapse in browsers; give them a visible space.
_EMPTY_BLOCK_RE = re.compile(r"<(h[1-6]|p)(\s[^>]*)?>\s*</\1>")


def _load_optional_part(package: DocxPackage, part: str, parser: Callable[[bytes], T], fallback: T) -> T:
    try:
        data = package.read_bytes(part)
    except KeyError:
        logger.debug("Package has no %s; feature disabled", part)
        return fallback
    except InputError as exc:
        logger.warning("Ignoring unreadable %s: %s", part, exc)
        return fallback
    try:
        return parser(data)
    except etree.XMLSyntaxError as exc:
        logger.warning("Ignoring malformed %s: %s", part, exc)
        return fallback


def fill_empty_blocks(html: str) -> str:
    return _EMPTY_BLOCK_RE.sub(lambda m: f"<{m.group(1)}{m.group(2) or ''}>{NBSP}</{m.group(1)}>", html)


class DocxToHtmlConverter:
    """Convert one .docx package to an HTML fragment.

    An instance owns its list state and must not be shared between threads;
    ``convert`` may be called repeatedly and starts from a clean list state.
    """

    def __init__(
        self,
        package: DocxPackage,
        styles: StylesTable,
        numbering: NumberingTable,
        relationships: dict,
        options: Optional[ConvertOptions] = None,
    ) -> None:
        self.package = package
        self.options = options or ConvertOptions()
        self.styles = styles
        self.numbering = numbering
        self.relationships = relationships

        self.lists = ListRenderState(numbering)
        self.media = MediaResolver(package, relationships, self.options.share_base_url)
        self.runs = RunRenderer(styles, self.media)
        self.tables = TableRenderer(styles, self.render_children)
        self._heading_patterns = compile_heading_patterns(self.options.heading_patterns)
        self._body: Optional[etree._Element] = None

    @classmethod
    def create(cls, data: bytes, options: Optional[ConvertOptions] = None) -> "DocxToHtmlConverter":
        """Open ``data`` as a .docx package and load its lookup tables.

        Raises:
            InputError: If ``data`` is empty or not a zip archive.
        """
        package = DocxPackage.from_bytes(data)
        relationships = _load_optional_part(package, RELATIONSHIPS_PART, parse_relationships, {})
        numbering = _load_optional_part(package, NUMBERING_PART, parse_numbering, NumberingTable.empty())
        styles = _load_optional_part(package, STYLES_PART, parse_styles, StylesTable.empty())
        logger.info(
            "Loaded package: %d relationships, %d numbering instances, %d styles",
            len(relationships),
            len(numbering),
            len(styles),
        )
        return cls(package, styles, numbering, relationships, options)

    def convert(self, extract_page_styles: Optional[bool] = None) -> ConvertResult:
        """Render the document body.

        Raises:
            StructureError: If the main document part or its body is missing
                or malformed.
        """
        if extract_page_styles is None:
            extract_page_styles = self.options.extract_page_styles

        body = self.body()
        self.lists.reset()
        final_sectpr = final_section_properties(body)

        page_styles = None
        page_styles_css = None
        if extract_page_styles:
            page_styles = page_styles_from_sectpr(final_sectpr)
            page_styles_css = format_page_css(page_styles)

        sections = split_sections(children(body), final_sectpr)
        parts: List[str] = []
        for section in sections:
            section_html = self.render_children(section.children)
            if is_blank(section_html):
                continue
            css = section_css(section.section_properties)
            style = f' style="{css}"' if css else ""
            parts.append(f'<div class="docx-section"{style}>{section_html}</div>')

        logger.info("Rendered %d of %d sections", len(parts), len(sections))
        html = fill_empty_blocks("".join(parts))
        return ConvertResult(
            html=f'<div class="docx">{html}</div>',
            page_styles=page_styles,
            page_styles_css=page_styles_css,
        )

    def body(self) -> etree._Element:
        if self._body is not None:
            return self._body
        try:
            data = self.package.read_bytes(DOCUMENT_PART)
        except KeyError as exc:
            raise StructureError(f"{DOCUMENT_PART} not found in package.") from exc
        try:
            root = parse_xml(data)
        except etree.XMLSyntaxError as exc:
            raise StructureError(f"{DOCUMENT_PART} is not well-formed XML: {exc}") from exc
        if not is_tag(root, "w:document"):
            raise StructureError("Unexpected structure: w:document not found.")
        body = find_child(root, "w:body")
        if body is None:
            raise StructureError("w:body not found.")
        self._body = body
        return body

    def render_children(self, elements: Sequence[etree._Element]) -> str:
        """Block walker: render body-level elements, closing any lists at the end."""
        return self._render_blocks(elements) + self.lists.close_all()

    def _render_blocks(self, elements: Sequence[etree._Element]) -> str:
        parts: List[str] = []
        for elem in elements:
            kind = classify_block(elem)
            if kind is BlockKind.PARAGRAPH:
                parts.append(self.render_paragraph(elem))
            elif kind is BlockKind.TABLE:
                parts.append(self.lists.close_all())
                parts.append(self.tables.render(elem))
            elif kind is BlockKind.CONTENT_CONTROL:
                parts.append(self._render_blocks(children(find_child(elem, "w:sdtContent"))))
        return "".join(parts)

    def render_paragraph(self, paragraph: etree._Element) -> str:
        ppr = find_child(paragraph, "w:pPr")
        style_id = child_attr(ppr, "w:pStyle")
        style = self.styles.get(style_id)

        content = self.runs.render_inline(paragraph, style)

        if has_bottom_border(ppr) and is_blank(content):
            return self.lists.close_all() + "<hr>"

        ref = numbering_reference(ppr, style)
        if ref is not None:
            return self.lists.open_item(ref.num_id, ref.level, content)

        flushed = self.lists.close_all()
        if is_blank(content):
            return f"{flushed}<p>{NBSP}</p>"

        props = PropertySet.merge(
            self.styles.defaults.paragraph,
            style.paragraph if style is not None else PropertySet(),
            PropertySet.from_element(ppr),
        )
        css = paragraph_css(props, contains_floated_image(paragraph))
        tag = block_tag(style_id, style, self._heading_patterns)
        return f"{flushed}<{tag}{style_attr(css)}>{content}</{tag}>"


def convert_docx(data: bytes, options: Optional[ConvertOptions] = None) -> ConvertResult:
    """Convert .docx bytes to HTML in one call."""
    converter = DocxToHtmlConverter.create(data, options)
    return converter.convert()


def to_standalone_html(result: ConvertResult, title: str = "Document", extra_css: Optional[str] = None) -> str:
    """Wrap a conversion result in a complete HTML document."""
    css = "\n".join(part for part in (result.page_styles_css, extra_css) if part)
    style_block = f"<style>\n{css}\n</style>\n" if css else ""
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{escape_text(title)}</title>\n"
        f"{style_block}"
        "</head>\n"
        "<body>\n"
        f"{result.html}\n"
        "</body>\n"
        "</html>\n"
    )
