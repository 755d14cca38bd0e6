"""Numbering parser - Parse numbering.xml for list definitions."""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional

from docxhtml.docx_parser.tree import child_attr, filter_children, find_child, get_attr, parse_xml
from docxhtml.ir import LevelDefinition, ListMeta
from docxhtml.utils import parse_int

logger = logging.getLogger(__name__)

# numFmt -> CSS list-style-type
NUMFMT_TO_CSS = {
    "decimal": "decimal",
    "decimalZero": "decimal",
    "lowerRoman": "lower-roman",
    "upperRoman": "upper-roman",
    "lowerLetter": "lower-alpha",
    "upperLetter": "upper-alpha",
    "bullet": "disc",
}

DEFAULT_LEVEL_TEXT = "%1."

_ROMAN_NUMERALS = (
    ("M", 1000), ("CM", 900), ("D", 500), ("CD", 400),
    ("C", 100), ("XC", 90), ("L", 50), ("XL", 40),
    ("X", 10), ("IX", 9), ("V", 5), ("IV", 4), ("I", 1),
)

_DEFAULT_MARKER_RE = re.compile(r"^%1[.)]?$")
_OTHER_LEVEL_RE = re.compile(r"%[2-9]")


class NumberingTable:
    """List level definitions keyed by ``numId``."""

    def __init__(
        self,
        definitions: Optional[Dict[str, Dict[int, LevelDefinition]]] = None,
        abstract_ids: Optional[Dict[str, str]] = None,
    ) -> None:
        self._definitions = dict(definitions or {})
        self._abstract_ids = dict(abstract_ids or {})

    @classmethod
    def empty(cls) -> "NumberingTable":
        return cls()

    def __contains__(self, num_id: str) -> bool:
        return num_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def levels(self, num_id: str) -> Dict[int, LevelDefinition]:
        return self._definitions.get(num_id, {})

    def level(self, num_id: str, level: int) -> Optional[LevelDefinition]:
        return self.levels(num_id).get(level)

    def definition_key(self, num_id: str) -> Optional[str]:
        """Identity of the abstract definition behind ``num_id`` (None if unknown)."""
        return self._abstract_ids.get(num_id)

    def level_meta(self, num_id: str, level: int) -> ListMeta:
        lvl = self.level(num_id, level)
        if lvl is None:
            return ListMeta(tag="ol", css_list_style="decimal", start=1, level_text=DEFAULT_LEVEL_TEXT)
        if lvl.number_format == "bullet":
            return ListMeta(tag="ul", css_list_style="disc", start=lvl.start, level_text=lvl.level_text)
        return ListMeta(
            tag="ol",
            css_list_style=NUMFMT_TO_CSS.get(lvl.number_format, "decimal"),
            start=lvl.start,
            level_text=lvl.level_text,
        )

    def number_format(self, num_id: str, level: int) -> str:
        lvl = self.level(num_id, level)
        return lvl.number_format if lvl is not None else "decimal"


def parse_numbering(numbering_xml: bytes) -> NumberingTable:
    """Parse numbering.xml to build numbering definitions.

    Args:
        numbering_xml: Raw bytes of numbering.xml content.

    Returns:
        NumberingTable mapping numId to its level definitions.
    """
    root = parse_xml(numbering_xml)

    # Parse abstract numbering definitions
    abstract_nums: Dict[str, Dict[int, LevelDefinition]] = {}
    for abstract in filter_children(root, "w:abstractNum"):
        abstract_id = get_attr(abstract, "w:abstractNumId")
        if abstract_id is None:
            continue
        levels: Dict[int, LevelDefinition] = {}
        for lvl in filter_children(abstract, "w:lvl"):
            ilvl = parse_int(get_attr(lvl, "w:ilvl"))
            if ilvl is None:
                continue
            levels[ilvl] = _parse_level(lvl)
        abstract_nums[abstract_id] = levels

    # Parse numbering instances
    definitions: Dict[str, Dict[int, LevelDefinition]] = {}
    abstract_ids: Dict[str, str] = {}
    for num in filter_children(root, "w:num"):
        num_id = get_attr(num, "w:numId")
        abstract_id = child_attr(num, "w:abstractNumId")
        if num_id is None or abstract_id is None:
            continue
        levels = dict(abstract_nums.get(abstract_id, {}))
        for override in filter_children(num, "w:lvlOverride"):
            ilvl = parse_int(get_attr(override, "w:ilvl"))
            if ilvl is None:
                continue
            override_lvl = find_child(override, "w:lvl")
            if override_lvl is not None:
                levels[ilvl] = _parse_level(override_lvl)
            start = parse_int(child_attr(override, "w:startOverride"))
            if start is not None:
                base = levels.get(ilvl, LevelDefinition())
                levels[ilvl] = LevelDefinition(base.number_format, base.level_text, start)
        definitions[num_id] = levels
        abstract_ids[num_id] = abstract_id

    logger.debug("Loaded %d numbering instances", len(definitions))
    return NumberingTable(definitions, abstract_ids)


def _parse_level(lvl) -> LevelDefinition:
    start = parse_int(child_attr(lvl, "w:start"))
    return LevelDefinition(
        number_format=child_attr(lvl, "w:numFmt") or "decimal",
        level_text=child_attr(lvl, "w:lvlText") or DEFAULT_LEVEL_TEXT,
        start=start if start is not None else 1,
    )


def is_default_marker(level_text: Optional[str]) -> bool:
    """True when the native list counter can render the marker (``%1.``, ``%1)``)."""
    if not level_text:
        return True
    template = level_text.strip()
    return bool(_DEFAULT_MARKER_RE.match(template)) and not _OTHER_LEVEL_RE.search(template)


def to_roman(value: int) -> str:
    result = []
    for numeral, amount in _ROMAN_NUMERALS:
        while value >= amount:
            result.append(numeral)
            value -= amount
    return "".join(result)


def to_alpha(value: int) -> str:
    """Bijective base-26: 1 -> A, 26 -> Z, 27 -> AA."""
    letters = []
    while value > 0:
        value -= 1
        letters.append(chr(ord("A") + value % 26))
        value //= 26
    return "".join(reversed(letters))


def format_counter(value: int, number_format: str) -> str:
    if number_format == "lowerRoman":
        return to_roman(value).lower()
    if number_format == "upperRoman":
        return to_roman(value)
    if number_format == "lowerLetter":
        return to_alpha(value).lower()
    if number_format == "upperLetter":
        return to_alpha(value)
    return str(value)
