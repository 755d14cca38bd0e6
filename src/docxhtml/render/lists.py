"""Nested list rendering state.

A ``ListRenderState`` is threaded through one body walk. It keeps a stack of
open list containers (one per nesting level, innermost last) and the running
counters of every ``numId`` it has seen.
"""

from __future__ import annotations

import re
from typing import Dict, List

from docxhtml.docx_parser.numbering import NumberingTable, format_counter, is_default_marker
from docxhtml.ir import ListFrame, ListMeta
from docxhtml.utils import escape_text, style_attr

_LEVEL_REF_RE = re.compile(r"%(\d+)")


class ListRenderState:
    """Open list frames and per-list counters for one conversion."""

    def __init__(self, numbering: NumberingTable) -> None:
        self._numbering = numbering
        self._stack: List[ListFrame] = []
        self._counters: Dict[str, Dict[int, int]] = {}

    def reset(self) -> None:
        self._stack.clear()
        self._counters.clear()

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def levels(self) -> List[int]:
        return [frame.level for frame in self._stack]

    def counters(self, num_id: str) -> Dict[int, int]:
        return dict(self._counters.get(num_id, {}))

    def open_item(self, num_id: str, level: int, content: str) -> str:
        """Emit the markup that moves the list state to a new item at ``level``."""
        level = max(0, level)
        parts: List[str] = []

        while self._stack and self._stack[-1].level > level:
            parts.append(self._pop())

        top = self._stack[-1] if self._stack else None
        if (
            top is not None
            and top.level == level
            and self._numbering.definition_key(top.num_id) != self._numbering.definition_key(num_id)
        ):
            parts.append(self._pop())

        while len(self._stack) <= level:
            parts.append(self._push(num_id, len(self._stack)))

        frame = self._stack[level]
        if frame.li_open:
            parts.append("</li>")

        meta = self._numbering.level_meta(num_id, level)
        if is_default_marker(meta.level_text):
            parts.append(f"<li>{content}")
        else:
            marker = escape_text(self.marker_text(num_id, level))
            parts.append(f'<li><span class="docx-marker">{marker}</span> {content}')
        frame.li_open = True

        if meta.tag == "ol":
            self._advance(num_id, level)

        return "".join(parts)

    def close_all(self) -> str:
        parts = []
        while self._stack:
            parts.append(self._pop())
        return "".join(parts)

    def marker_text(self, num_id: str, level: int) -> str:
        """Expand ``%1``..``%9`` in the level template with the current counters."""
        meta = self._numbering.level_meta(num_id, level)
        counters = self._counters.setdefault(num_id, {})

        def substitute(match: re.Match) -> str:
            ref_level = int(match.group(1)) - 1
            value = counters.get(ref_level, 1)
            if ref_level < level and self._item_open_at(num_id, ref_level):
                # Outer ordered levels were already advanced past their open item.
                if self._numbering.level_meta(num_id, ref_level).tag == "ol":
                    value -= 1
            return format_counter(value, self._numbering.number_format(num_id, ref_level))

        return _LEVEL_REF_RE.sub(substitute, meta.level_text or "%1.")

    def _item_open_at(self, num_id: str, level: int) -> bool:
        if level >= len(self._stack):
            return False
        frame = self._stack[level]
        return frame.li_open and frame.num_id == num_id

    def _push(self, num_id: str, level: int) -> str:
        meta = self._numbering.level_meta(num_id, level)
        counters = self._counters.setdefault(num_id, {})
        counters.setdefault(level, meta.start)

        self._stack.append(ListFrame(num_id=num_id, level=level, tag=meta.tag))
        return f"<{meta.tag}{self._start_attr(meta)}{style_attr(self._container_css(meta))}>"

    def _pop(self) -> str:
        frame = self._stack.pop()
        closing = "</li>" if frame.li_open else ""
        return f"{closing}</{frame.tag}>"

    def _advance(self, num_id: str, level: int) -> None:
        counters = self._counters.setdefault(num_id, {})
        counters[level] = counters.get(level, self._numbering.level_meta(num_id, level).start) + 1
        deeper = set(self._numbering.levels(num_id)) | set(counters)
        for deeper_level in deeper:
            if deeper_level > level:
                counters[deeper_level] = self._numbering.level_meta(num_id, deeper_level).start

    @staticmethod
    def _start_attr(meta: ListMeta) -> str:
        if meta.tag == "ol" and meta.start != 1:
            return f' start="{meta.start}"'
        return ""

    @staticmethod
    def _container_css(meta: ListMeta) -> Dict[str, str]:
        if is_default_marker(meta.level_text):
            return {"list-style-type": meta.css_list_style}
        return {"list-style-type": "none", "padding-left": "1.5em"}
