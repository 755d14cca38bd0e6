"""Lookup helpers over parsed WordprocessingML trees."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from lxml import etree

from docxhtml.utils import parse_int

# OOXML namespaces
NAMESPACES = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "wp": "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing",
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "pic": "http://schemas.openxmlformats.org/drawingml/2006/picture",
    "mc": "http://schemas.openxmlformats.org/markup-compatibility/2006",
    "rel": "http://schemas.openxmlformats.org/package/2006/relationships",
    "xml": "http://www.w3.org/XML/1998/namespace",
}

_OFF_VALUES = {"0", "false", "off"}

# Whitespace-only text nodes must survive parsing; they are content in w:t.
_PARSER = etree.XMLParser(resolve_entities=False, remove_blank_text=False, huge_tree=True)


class BlockKind(Enum):
    """Body-level node kinds the block walker knows how to handle."""

    PARAGRAPH = "p"
    TABLE = "tbl"
    CONTENT_CONTROL = "sdt"
    SECTION_PROPERTIES = "sectPr"
    IGNORED = ""


_BLOCK_KINDS = {
    f"{{{NAMESPACES['w']}}}p": BlockKind.PARAGRAPH,
    f"{{{NAMESPACES['w']}}}tbl": BlockKind.TABLE,
    f"{{{NAMESPACES['w']}}}sdt": BlockKind.CONTENT_CONTROL,
    f"{{{NAMESPACES['w']}}}sectPr": BlockKind.SECTION_PROPERTIES,
}


def parse_xml(data: bytes) -> etree._Element:
    """Parse a package part. Raises ``etree.XMLSyntaxError`` on bad input."""
    return etree.fromstring(data, _PARSER)


def qn(tag: str) -> str:
    """Expand ``w:p`` into Clark notation ``{namespace}p``."""
    prefix, local = tag.split(":", 1)
    return f"{{{NAMESPACES[prefix]}}}{local}"


def local_name(elem: etree._Element) -> str:
    if not isinstance(elem.tag, str):
        return ""
    return etree.QName(elem).localname


def is_tag(elem: Optional[etree._Element], tag: str) -> bool:
    return elem is not None and elem.tag == qn(tag)


def classify_block(elem: etree._Element) -> BlockKind:
    if not isinstance(elem.tag, str):
        return BlockKind.IGNORED
    return _BLOCK_KINDS.get(elem.tag, BlockKind.IGNORED)


def children(elem: Optional[etree._Element]) -> List[etree._Element]:
    """Element children in document order, skipping comments and PIs."""
    if elem is None:
        return []
    return [child for child in elem if isinstance(child.tag, str)]


def find_child(elem: Optional[etree._Element], tag: str) -> Optional[etree._Element]:
    """First direct child with the given prefixed tag, or None."""
    if elem is None:
        return None
    return elem.find(tag, NAMESPACES)


def filter_children(elem: Optional[etree._Element], tag: str) -> List[etree._Element]:
    """All direct children with the given prefixed tag."""
    if elem is None:
        return []
    return elem.findall(tag, NAMESPACES)


def get_attr(elem: Optional[etree._Element], name: str) -> Optional[str]:
    """Read ``w:val``-style prefixed attributes, or plain ones such as ``Id``."""
    if elem is None:
        return None
    if ":" in name:
        return elem.get(qn(name))
    return elem.get(name)


def get_int_attr(elem: Optional[etree._Element], name: str) -> Optional[int]:
    return parse_int(get_attr(elem, name))


def child_attr(elem: Optional[etree._Element], tag: str, name: str = "w:val") -> Optional[str]:
    """Shortcut for ``<w:pStyle w:val="..."/>``-shaped lookups."""
    return get_attr(find_child(elem, tag), name)


def get_text(elem: Optional[etree._Element]) -> str:
    """Raw text content of a text-bearing node such as ``w:t``."""
    if elem is None or elem.text is None:
        return ""
    return elem.text


def collect_text(elem: Optional[etree._Element]) -> str:
    """Concatenated ``w:t`` text of every descendant run."""
    if elem is None:
        return ""
    return "".join(get_text(t) for t in elem.iter(qn("w:t")))


def is_on(elem: Optional[etree._Element]) -> bool:
    """Evaluate an OOXML toggle property (``<w:b/>``, ``<w:b w:val="0"/>``)."""
    if elem is None:
        return False
    val = get_attr(elem, "w:val")
    return val is None or val.lower() not in _OFF_VALUES
