"""Media/link resolution - inline images as data URIs and rewrite hyperlinks."""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass
from typing import Dict, Optional

from lxml import etree

from docxhtml.docx_parser.package import DocxPackage, normalize_part_name
from docxhtml.docx_parser.relationships import is_hyperlink, is_image
from docxhtml.docx_parser.tree import filter_children, find_child, get_attr, get_int_attr, get_text
from docxhtml.errors import InputError
from docxhtml.ir import DEFAULT_SHARE_BASE_URL, Relationship
from docxhtml.utils import emu_to_pt, escape_attr, pt, style_attr

logger = logging.getLogger(__name__)

MIME_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "svg": "image/svg+xml",
    "wmf": "image/wmf",
    "emf": "image/emf",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "webp": "image/webp",
}
DEFAULT_MIME_TYPE = "application/octet-stream"

# Visible link text that names another office document.
DOCUMENT_LINK_EXTENSIONS = (".docx", ".doc", ".pdf")
ABSOLUTE_URL_SCHEMES = ("http://", "https://", "mailto:", "ftp://")

_ANCHOR_NAME_RE = re.compile(r"[^a-zA-Z0-9._-]")

# (distance attribute, CSS margin side)
_WRAP_DISTANCES = (("distL", "left"), ("distR", "right"), ("distT", "top"), ("distB", "bottom"))


@dataclass(frozen=True)
class LinkTarget:
    """Where a ``w:hyperlink`` points, and text that replaces its runs if any."""

    href: str
    external: bool
    display_text: Optional[str] = None


def mime_type(file_name: str) -> str:
    ext = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
    return MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


def file_name_from_path(path: str) -> str:
    return re.split(r"[\\/]", path)[-1]


def anchor_file_name(anchor_text: str) -> str:
    """Reduce visible link text to a shareable file name (before any comma)."""
    return _ANCHOR_NAME_RE.sub("", anchor_text.split(",")[0])


def looks_like_document(text: Optional[str]) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(ext in lowered for ext in DOCUMENT_LINK_EXTENSIONS)


def resolve_part_path(target: str, base_dir: str = "word") -> str:
    """Resolve a relationship target against the source part's directory."""
    if target.startswith("/"):
        return normalize_part_name(target)
    return normalize_part_name(posixpath.join(base_dir, target))


class MediaResolver:
    """Resolve relationship ids to embedded images and hyperlink targets."""

    def __init__(
        self,
        package: Optional[DocxPackage],
        relationships: Dict[str, Relationship],
        share_base_url: str = DEFAULT_SHARE_BASE_URL,
    ) -> None:
        self._package = package
        self._relationships = relationships
        self._share_base_url = share_base_url.rstrip("/")

    def share_url(self, name: str) -> str:
        return f"{self._share_base_url}/{name}"

    def render_drawing(self, drawing: etree._Element) -> str:
        """Render a ``w:drawing`` as a data-URI ``<img>``; "" when unresolvable."""
        anchor = find_child(drawing, "wp:anchor")
        container = anchor if anchor is not None else find_child(drawing, "wp:inline")
        if container is None:
            return ""

        pic = find_child(find_child(find_child(container, "a:graphic"), "a:graphicData"), "pic:pic")
        if pic is None:
            return ""

        blip = find_child(find_child(pic, "pic:blipFill"), "a:blip")
        rel_id = get_attr(blip, "r:embed") or get_attr(blip, "r:link")
        if not rel_id:
            return ""

        rel = self._relationships.get(rel_id)
        if rel is None or not is_image(rel):
            logger.debug("Drawing references %s which is not an image relationship", rel_id)
            return ""

        data_uri = self._data_uri(rel)
        if data_uri is None:
            return ""

        css = {"max-width": "100%", "height": "auto"}
        if anchor is not None:
            css.update(self._anchor_css(anchor))

        alt = self._alt_text(pic, container)
        return f'<img src="{data_uri}" alt="{escape_attr(alt)}"{style_attr(css)} />'

    def resolve_link(self, hyperlink: etree._Element) -> Optional[LinkTarget]:
        """Work out the href of a ``w:hyperlink``; None when it points nowhere."""
        rel_id = get_attr(hyperlink, "r:id")
        anchor = get_attr(hyperlink, "w:anchor")
        display = self.anchor_display_text(hyperlink)

        rel = self._relationships.get(rel_id) if rel_id else None
        if rel is not None and is_hyperlink(rel):
            href = rel.target
            if href and not href.lower().startswith(ABSOLUTE_URL_SCHEMES):
                if looks_like_document(display):
                    cleaned = anchor_file_name(display or "")
                    href = self.share_url(cleaned)
                    return LinkTarget(href=href, external=True, display_text=display or cleaned or href)
                href = self.share_url(file_name_from_path(rel.target))
            return LinkTarget(href=href, external=True)

        if anchor:
            return LinkTarget(href=f"#{anchor}", external=False, display_text=display)
        return None

    @staticmethod
    def anchor_display_text(hyperlink: etree._Element) -> Optional[str]:
        """First literal run text inside the hyperlink."""
        for run in filter_children(hyperlink, "w:r"):
            text = get_text(find_child(run, "w:t"))
            if text:
                return text
        return None

    def _data_uri(self, rel: Relationship) -> Optional[str]:
        if self._package is None or rel.is_external:
            return None
        part = resolve_part_path(rel.target)
        try:
            encoded = self._package.read_base64(part)
        except KeyError:
            logger.debug("Image part %s is missing", part)
            return None
        except InputError as exc:
            logger.warning("Skipping unreadable image %s: %s", part, exc)
            return None
        return f"data:{mime_type(rel.target)};base64,{encoded}"

    @staticmethod
    def _anchor_css(anchor: etree._Element) -> Dict[str, str]:
        css: Dict[str, str] = {}
        if find_child(anchor, "wp:wrapSquare") is not None:
            css["float"] = "left"
        elif find_child(anchor, "wp:wrapTopAndBottom") is not None:
            css["clear"] = "both"
        for attr, side in _WRAP_DISTANCES:
            distance = get_int_attr(anchor, attr)
            if distance:
                css[f"margin-{side}"] = pt(emu_to_pt(distance))
        return css

    @staticmethod
    def _alt_text(pic: etree._Element, container: etree._Element) -> str:
        for props in (find_child(find_child(pic, "pic:nvPicPr"), "pic:cNvPr"), find_child(container, "wp:docPr")):
            alt = get_attr(props, "descr") or get_attr(props, "title")
            if alt:
                return alt
        return ""
