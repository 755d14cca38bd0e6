"""DOCX to HTML converter."""

from .converter import DocxToHtmlConverter, convert_docx, to_standalone_html
from .errors import DocxHtmlError, InputError, StructureError
from .ir import ConvertOptions, ConvertResult, PageStyles

__version__ = "0.1.0"

__all__ = [
    "DocxToHtmlConverter",
    "convert_docx",
    "to_standalone_html",
    "DocxHtmlError",
    "InputError",
    "StructureError",
    "ConvertOptions",
    "ConvertResult",
    "PageStyles",
]
