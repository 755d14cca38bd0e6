"""DOCX Parser Package - OOXML part loading and lookup tables."""

from .package import DocxPackage
from .styles import parse_styles, StyleResolver, StylesTable
from .numbering import parse_numbering, NumberingTable, format_counter, is_default_marker
from .relationships import parse_relationships

__all__ = [
    "DocxPackage",
    "parse_styles",
    "StyleResolver",
    "StylesTable",
    "parse_numbering",
    "NumberingTable",
    "format_counter",
    "is_default_marker",
    "parse_relationships",
]
