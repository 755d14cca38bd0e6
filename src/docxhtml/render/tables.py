"""Table renderer - rebuild ``w:tbl`` grids as HTML tables.

Word models merged cells sparsely: a horizontally merged region is one cell
with ``w:gridSpan`` (or legacy ``w:hMerge`` continuation cells), and a
vertically merged region is a ``w:vMerge w:val="restart"`` cell followed by
``w:vMerge`` continuation cells in the same grid column of later rows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from lxml import etree

from docxhtml.docx_parser.styles import StylesTable
from docxhtml.docx_parser.tree import child_attr, children, filter_children, find_child, get_attr, get_int_attr
from docxhtml.ir import PropertySet
from docxhtml.utils import NBSP, eighths_to_pt, format_number, hex_color, is_blank, pt, style_attr, twips_to_pt

logger = logging.getLogger(__name__)

BORDER_SIDES = ("top", "left", "bottom", "right")
BORDER_STYLES = {"single": "solid", "dashed": "dashed", "dotted": "dotted", "double": "double"}
DEFAULT_BORDER_SIZE = 4  # eighths of a point

DEFAULT_CELL_CSS = {"vertical-align": "top", "padding": "4px"}


@dataclass
class GridCell:
    """A ``w:tc`` placed on the table grid."""

    element: etree._Element
    properties: Optional[etree._Element]
    column: int
    span: int


def parse_width(elem: Optional[etree._Element]) -> Optional[str]:
    """CSS width for ``w:tblW``/``w:tcW``/``w:gridCol``; None when unusable."""
    if elem is None:
        return None
    width_type = get_attr(elem, "w:type") or "dxa"
    if width_type == "auto":
        return "auto"
    value = get_int_attr(elem, "w:w")
    if value is None:
        return None
    if width_type == "pct":
        return f"{format_number(value / 50)}%"
    if width_type == "dxa":
        return pt(twips_to_pt(value))
    return None


def parse_border(border: Optional[etree._Element]) -> Optional[str]:
    """CSS border shorthand for a ``w:top``-style border element."""
    val = get_attr(border, "w:val")
    if not val or val in ("none", "nil"):
        return None
    size = get_int_attr(border, "w:sz") or DEFAULT_BORDER_SIZE
    color = hex_color(get_attr(border, "w:color")) or "black"
    style = BORDER_STYLES.get(val) or (val if val.isalpha() else "solid")
    return f"{pt(eighths_to_pt(size))} {style} {color}"


def borders_css(borders: Optional[etree._Element]) -> Dict[str, str]:
    css: Dict[str, str] = {}
    for side in BORDER_SIDES:
        style = parse_border(find_child(borders, f"w:{side}"))
        if style:
            css[f"border-{side}"] = style
    return css


def is_merge_continuation(merge: Optional[etree._Element]) -> bool:
    return merge is not None and get_attr(merge, "w:val") != "restart"


def grid_cells(row: etree._Element) -> List[GridCell]:
    """Place a row's cells on grid columns, honouring gridBefore and gridSpan."""
    column = get_int_attr(find_child(find_child(row, "w:trPr"), "w:gridBefore"), "w:val") or 0
    cells: List[GridCell] = []
    for tc in filter_children(row, "w:tc"):
        tc_pr = find_child(tc, "w:tcPr")
        span = get_int_attr(find_child(tc_pr, "w:gridSpan"), "w:val") or 1
        cells.append(GridCell(element=tc, properties=tc_pr, column=column, span=max(1, span)))
        column += max(1, span)
    return cells


class TableRenderer:
    """Render one ``w:tbl``; cell contents go back through the block walker."""

    def __init__(self, styles: StylesTable, render_children: Callable[[Sequence[etree._Element]], str]) -> None:
        self._styles = styles
        self._render_children = render_children

    def table_properties(self, tbl: etree._Element) -> PropertySet:
        direct = find_child(tbl, "w:tblPr")
        style = self._styles.get(child_attr(direct, "w:tblStyle"))
        base = style.table if style is not None else PropertySet()
        return PropertySet.merge(base, PropertySet.from_element(direct))

    def render(self, tbl: etree._Element) -> str:
        props = self.table_properties(tbl)

        table_css = {"border-collapse": "collapse"}
        width = parse_width(props.get("w:tblW"))
        if width:
            table_css["width"] = width

        borders = props.get("w:tblBorders")
        table_css.update(borders_css(borders))
        inside_h = parse_border(find_child(borders, "w:insideH"))
        inside_v = parse_border(find_child(borders, "w:insideV"))

        parts = [f"<table border=\"1\"{style_attr(table_css)}>", self._colgroup(tbl)]

        rows = [grid_cells(tr) for tr in filter_children(tbl, "w:tr")]
        for row_index, cells in enumerate(rows):
            parts.append("<tr>")
            for cell_index, cell in enumerate(cells):
                if is_merge_continuation(find_child(cell.properties, "w:hMerge")):
                    continue
                if is_merge_continuation(find_child(cell.properties, "w:vMerge")):
                    continue
                is_last_row = row_index == len(rows) - 1
                is_last_cell = cell_index == len(cells) - 1
                parts.append(self._render_cell(cell, rows, row_index, is_last_row, is_last_cell, inside_h, inside_v))
            parts.append("</tr>")

        parts.append("</table>")
        return "".join(parts)

    def _colgroup(self, tbl: etree._Element) -> str:
        columns = filter_children(find_child(tbl, "w:tblGrid"), "w:gridCol")
        if not columns:
            return ""
        cols = []
        for col in columns:
            width = parse_width(col)
            cols.append(f"<col{style_attr({'width': width})}>" if width else "<col>")
        return f"<colgroup>{''.join(cols)}</colgroup>"

    def _render_cell(
        self,
        cell: GridCell,
        rows: List[List[GridCell]],
        row_index: int,
        is_last_row: bool,
        is_last_cell: bool,
        inside_h: Optional[str],
        inside_v: Optional[str],
    ) -> str:
        attrs = ""
        css = dict(DEFAULT_CELL_CSS)
        if inside_h and not is_last_row:
            css["border-bottom"] = inside_h
        if inside_v and not is_last_cell:
            css["border-right"] = inside_v

        if cell.span > 1:
            attrs += f' colspan="{cell.span}"'

        v_merge = find_child(cell.properties, "w:vMerge")
        if v_merge is not None and get_attr(v_merge, "w:val") == "restart":
            rowspan = self._rowspan(cell, rows, row_index)
            if rowspan > 1:
                attrs += f' rowspan="{rowspan}"'

        width = parse_width(find_child(cell.properties, "w:tcW"))
        if width:
            css["width"] = width

        fill = hex_color(get_attr(find_child(cell.properties, "w:shd"), "w:fill"))
        if fill:
            css["background-color"] = fill

        css.update(borders_css(find_child(cell.properties, "w:tcBorders")))

        content = self._render_children(children(cell.element))
        if is_blank(content):
            content = NBSP
        return f"<td{attrs}{style_attr(css)}>{content}</td>"

    @staticmethod
    def _rowspan(cell: GridCell, rows: List[List[GridCell]], row_index: int) -> int:
        count = 1
        for next_cells in rows[row_index + 1:]:
            below = next((c for c in next_cells if c.column == cell.column), None)
            if below is None or not is_merge_continuation(find_child(below.properties, "w:vMerge")):
                break
            count += 1
        return count
