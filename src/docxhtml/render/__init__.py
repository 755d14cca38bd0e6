"""HTML renderers - lists, runs, paragraphs, tables, media and sections."""

from .lists import ListRenderState
from .media import MediaResolver
from .runs import RunRenderer
from .tables import TableRenderer
from .sections import split_sections, format_page_css, page_styles_from_sectpr

__all__ = [
    "ListRenderState",
    "MediaResolver",
    "RunRenderer",
    "TableRenderer",
    "split_sections",
    "format_page_css",
    "page_styles_from_sectpr",
]
