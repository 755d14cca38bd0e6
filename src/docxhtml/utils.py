"""Unit conversion and HTML helpers shared by the renderers."""

from __future__ import annotations

import html
import re
from typing import Mapping, Optional

TWIPS_PER_POINT = 20
HALF_POINTS_PER_POINT = 2
EIGHTHS_PER_POINT = 8
EMU_PER_POINT = 12700
FIFTIETHS_PER_PERCENT = 50

NBSP = "&nbsp;"

_HEX_COLOR_RE = re.compile(r"^[0-9A-Fa-f]{6}$")


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse an OOXML integer attribute, returning None when it is unusable."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return None


def twips_to_pt(value: int) -> float:
    return value / TWIPS_PER_POINT


def half_points_to_pt(value: int) -> float:
    return value / HALF_POINTS_PER_POINT


def eighths_to_pt(value: int) -> float:
    return value / EIGHTHS_PER_POINT


def emu_to_pt(value: int) -> float:
    return value / EMU_PER_POINT


def format_number(value: float) -> str:
    """Render a CSS number without a trailing ``.0`` (``12.0`` -> ``12``)."""
    value = round(float(value), 4)
    if value.is_integer():
        return str(int(value))
    return f"{value:.4f}".rstrip("0").rstrip(".")


def pt(value: float) -> str:
    return f"{format_number(value)}pt"


def css_declarations(declarations: Mapping[str, str]) -> str:
    """Join an ordered property mapping into an inline ``style`` value."""
    return "".join(f"{prop}:{value};" for prop, value in declarations.items())


def style_attr(declarations: Mapping[str, str]) -> str:
    css = css_declarations(declarations)
    return f' style="{escape_attr(css)}"' if css else ""


def hex_color(value: Optional[str]) -> Optional[str]:
    """``#RRGGBB`` for an OOXML hex colour; None for ``auto`` or anything malformed."""
    if value and _HEX_COLOR_RE.match(value):
        return f"#{value}"
    return None


def escape_text(text: str) -> str:
    return html.escape(text, quote=False)


def escape_attr(text: str) -> str:
    return html.escape(text, quote=True)


def is_blank(fragment: str) -> bool:
    """True when an HTML fragment carries no visible content at all."""
    return not fragment.strip()
