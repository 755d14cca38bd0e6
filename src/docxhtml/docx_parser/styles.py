"""Styles parser - Parse styles.xml and resolve basedOn inheritance."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from lxml import etree

from docxhtml.docx_parser.tree import child_attr, filter_children, find_child, get_attr, parse_xml
from docxhtml.ir import DocumentDefaults, PropertySet, ResolvedStyle

logger = logging.getLogger(__name__)


@dataclass
class StyleDefinition:
    """A ``w:style`` element exactly as declared, before inheritance."""

    style_id: str
    style_type: Optional[str] = None
    name: Optional[str] = None
    based_on: Optional[str] = None
    linked_style: Optional[str] = None
    paragraph: PropertySet = field(default_factory=PropertySet)
    run: PropertySet = field(default_factory=PropertySet)
    table: PropertySet = field(default_factory=PropertySet)


class StyleResolver:
    """Memoized resolution of style ids against their ``basedOn`` chains.

    Resolving a style merges its resolved base with its own properties, tag
    by tag, so the derived value always wins. A style reached again while it
    is still being resolved is treated as having no base.
    """

    def __init__(self, definitions: Dict[str, StyleDefinition]) -> None:
        self._definitions = definitions
        self._resolved: Dict[str, ResolvedStyle] = {}
        self._in_progress: Set[str] = set()

    def resolve(self, style_id: str) -> ResolvedStyle:
        if style_id in self._resolved:
            return self._resolved[style_id]

        definition = self._definitions.get(style_id)
        if definition is None:
            return ResolvedStyle(style_id=style_id)

        self._in_progress.add(style_id)
        try:
            base: Optional[ResolvedStyle] = None
            if definition.based_on:
                if definition.based_on in self._in_progress:
                    logger.debug("basedOn cycle at style %s; ignoring its base", style_id)
                else:
                    base = self.resolve(definition.based_on)
        finally:
            self._in_progress.discard(style_id)

        if base is None:
            base = ResolvedStyle(style_id=style_id)

        resolved = ResolvedStyle(
            style_id=style_id,
            style_type=definition.style_type,
            name=definition.name,
            paragraph=PropertySet.merge(base.paragraph, definition.paragraph),
            run=PropertySet.merge(base.run, definition.run),
            table=PropertySet.merge(base.table, definition.table),
            based_on=definition.based_on,
            linked_style=definition.linked_style,
        )
        self._resolved[style_id] = resolved
        return resolved

    def resolve_all(self) -> Dict[str, ResolvedStyle]:
        for style_id in self._definitions:
            self.resolve(style_id)
        return dict(self._resolved)


class StylesTable:
    """Resolved named styles plus the document defaults."""

    def __init__(
        self,
        styles: Optional[Dict[str, ResolvedStyle]] = None,
        defaults: Optional[DocumentDefaults] = None,
    ) -> None:
        self._styles = dict(styles or {})
        self.defaults = defaults or DocumentDefaults()

    @classmethod
    def empty(cls) -> "StylesTable":
        return cls()

    def get(self, style_id: Optional[str]) -> Optional[ResolvedStyle]:
        if not style_id:
            return None
        return self._styles.get(style_id)

    def __contains__(self, style_id: str) -> bool:
        return style_id in self._styles

    def __len__(self) -> int:
        return len(self._styles)


def parse_styles(styles_xml: bytes) -> StylesTable:
    """Parse styles.xml into a table of resolved styles.

    Args:
        styles_xml: Raw bytes of styles.xml content.

    Returns:
        StylesTable with every declared style resolved once.
    """
    root = parse_xml(styles_xml)
    defaults = _parse_doc_defaults(find_child(root, "w:docDefaults"))

    definitions: Dict[str, StyleDefinition] = {}
    for style in filter_children(root, "w:style"):
        style_id = get_attr(style, "w:styleId")
        if not style_id:
            continue
        definitions[style_id] = StyleDefinition(
            style_id=style_id,
            style_type=get_attr(style, "w:type"),
            name=child_attr(style, "w:name"),
            based_on=child_attr(style, "w:basedOn"),
            linked_style=child_attr(style, "w:link"),
            paragraph=PropertySet.from_element(find_child(style, "w:pPr")),
            run=PropertySet.from_element(find_child(style, "w:rPr")),
            table=PropertySet.from_element(find_child(style, "w:tblPr")),
        )

    resolved = StyleResolver(definitions).resolve_all()
    logger.debug("Resolved %d styles", len(resolved))
    return StylesTable(resolved, defaults)


def _parse_doc_defaults(doc_defaults: Optional[etree._Element]) -> DocumentDefaults:
    if doc_defaults is None:
        return DocumentDefaults()
    rpr = find_child(find_child(doc_defaults, "w:rPrDefault"), "w:rPr")
    ppr = find_child(find_child(doc_defaults, "w:pPrDefault"), "w:pPr")
    return DocumentDefaults(
        paragraph=PropertySet.from_element(ppr),
        run=PropertySet.from_element(rpr),
    )
