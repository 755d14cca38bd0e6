"""Data model shared by the parsing and rendering stages.

The document tree itself stays as lxml elements; the structures here are
the tables built once per conversion (styles, numbering, relationships)
and the results handed back to callers.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from lxml import etree

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

# Style-id patterns recognised as headings; group 1 captures the level.
DEFAULT_HEADING_PATTERNS: Tuple[str, ...] = (
    r"^Heading([1-6])$",
    r"^T[ií]?tulo([1-6])$",
)
DEFAULT_SHARE_BASE_URL = "https://www.gov.br/seedoc/shared"


def _clark(tag: str) -> str:
    if tag.startswith("{"):
        return tag
    prefix, _, local = tag.partition(":")
    if prefix != "w" or not local:
        raise ValueError(f"Unsupported property tag: {tag!r}")
    return f"{{{W_NS}}}{local}"


class PropertySet:
    """Uniquely-tagged formatting properties (``w:b``, ``w:jc``, ...).

    Entries are keyed by qualified tag; registering a tag twice keeps the
    later element. Merging is last-writer-wins across layers.
    """

    __slots__ = ("_entries",)

    def __init__(self, elements: Iterable[etree._Element] = ()) -> None:
        self._entries: Dict[str, etree._Element] = {}
        for element in elements:
            if isinstance(element.tag, str):
                self._entries[element.tag] = element

    @classmethod
    def from_element(cls, container: Optional[etree._Element]) -> "PropertySet":
        """Build from a ``w:pPr``/``w:rPr``/``w:tblPr`` container (or None)."""
        if container is None:
            return cls()
        return cls(container)

    @classmethod
    def merge(cls, *layers: "PropertySet") -> "PropertySet":
        merged = cls()
        for layer in layers:
            if layer:
                merged._entries.update(layer._entries)
        return merged

    def get(self, tag: str) -> Optional[etree._Element]:
        return self._entries.get(_clark(tag))

    def __contains__(self, tag: str) -> bool:
        return _clark(tag) in self._entries

    def __iter__(self) -> Iterator[etree._Element]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def tags(self) -> List[str]:
        return list(self._entries)

    def __repr__(self) -> str:
        names = [tag.rsplit("}", 1)[-1] for tag in self._entries]
        return f"PropertySet({names})"


@dataclass(frozen=True)
class ResolvedStyle:
    """A named style after its ``basedOn`` chain has been merged in."""

    style_id: str
    style_type: Optional[str] = None
    name: Optional[str] = None
    paragraph: PropertySet = field(default_factory=PropertySet)
    run: PropertySet = field(default_factory=PropertySet)
    table: PropertySet = field(default_factory=PropertySet)
    based_on: Optional[str] = None
    linked_style: Optional[str] = None


@dataclass
class DocumentDefaults:
    """``w:docDefaults``: the lowest layer of every cascade."""

    paragraph: PropertySet = field(default_factory=PropertySet)
    run: PropertySet = field(default_factory=PropertySet)


@dataclass(frozen=True)
class LevelDefinition:
    """One level of a numbering definition."""

    number_format: str = "decimal"
    level_text: str = "%1."
    start: int = 1


@dataclass(frozen=True)
class ListMeta:
    """How a list level is rendered."""

    tag: str = "ol"  # "ul" or "ol"
    css_list_style: str = "decimal"
    start: int = 1
    level_text: str = "%1."


@dataclass
class ListFrame:
    """One open nesting level of a rendered list."""

    num_id: str
    level: int
    tag: str
    li_open: bool = False


@dataclass
class PageSection:
    """Body children sharing one ``w:sectPr``."""

    children: List[etree._Element] = field(default_factory=list)
    section_properties: Optional[etree._Element] = None


@dataclass(frozen=True)
class Relationship:
    rel_id: str
    type: str
    target: str
    target_mode: Optional[str] = None

    @property
    def is_external(self) -> bool:
        return (self.target_mode or "").lower() == "external"


@dataclass
class PageSize:
    width: Optional[float] = None
    height: Optional[float] = None
    orientation: str = "portrait"


@dataclass
class PageMargins:
    top: Optional[float] = None
    right: Optional[float] = None
    bottom: Optional[float] = None
    left: Optional[float] = None


@dataclass
class PageStyles:
    """Page geometry in points, taken from the body's final ``w:sectPr``."""

    size: PageSize = field(default_factory=PageSize)
    margin: PageMargins = field(default_factory=PageMargins)
    units: str = "pt"

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ConvertOptions:
    """Conversion settings."""

    extract_page_styles: bool = True
    heading_patterns: Tuple[str, ...] = DEFAULT_HEADING_PATTERNS
    share_base_url: str = DEFAULT_SHARE_BASE_URL


@dataclass
class ConvertResult:
    html: str
    page_styles: Optional[PageStyles] = None
    page_styles_css: Optional[str] = None
