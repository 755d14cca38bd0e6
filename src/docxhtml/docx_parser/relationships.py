"""Relationships parser - map rIds to their type and target."""

from __future__ import annotations

import logging
from typing import Dict

from docxhtml.docx_parser.tree import filter_children, parse_xml
from docxhtml.ir import Relationship

logger = logging.getLogger(__name__)

RELTYPE_HYPERLINK_SUFFIX = "/hyperlink"


def parse_relationships(rels_xml: bytes) -> Dict[str, Relationship]:
    """Parse document relationships.

    Args:
        rels_xml: Raw bytes of word/_rels/document.xml.rels.

    Returns:
        Dict mapping relationship ids to Relationship entries.
    """
    root = parse_xml(rels_xml)
    rels_map: Dict[str, Relationship] = {}

    for rel in filter_children(root, "rel:Relationship"):
        rel_id = rel.get("Id")
        if not rel_id:
            continue
        rels_map[rel_id] = Relationship(
            rel_id=rel_id,
            type=rel.get("Type", ""),
            target=rel.get("Target", ""),
            target_mode=rel.get("TargetMode"),
        )

    logger.debug("Loaded %d relationships", len(rels_map))
    return rels_map


def is_hyperlink(rel: Relationship) -> bool:
    return rel.type.endswith(RELTYPE_HYPERLINK_SUFFIX)


def is_image(rel: Relationship) -> bool:
    return "image" in rel.type
