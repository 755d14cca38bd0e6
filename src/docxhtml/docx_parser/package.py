"""Thin wrapper around the .docx zip container."""

from __future__ import annotations

import base64
import io
import logging
import posixpath
import zipfile
import zlib
from docxhtml.errors import InputError

logger = logging.getLogger(__name__)

DOCUMENT_PART = "word/document.xml"
STYLES_PART = "word/styles.xml"
NUMBERING_PART = "word/numbering.xml"
RELATIONSHIPS_PART = "word/_rels/document.xml.rels"


def normalize_part_name(name: str) -> str:
    """Package part names are case-sensitive, slash-separated and relative."""
    name = name.replace("\\", "/").lstrip("/")
    return posixpath.normpath(name) if name else name


class DocxPackage:
    """Named-part access over an opened .docx archive."""

    def __init__(self, zf: zipfile.ZipFile) -> None:
        self._zf = zf
        self._names = set(zf.namelist())

    @classmethod
    def from_bytes(cls, data: bytes) -> "DocxPackage":
        if not data:
            raise InputError("The input file is empty or corrupted.")
        try:
            zf = zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile as exc:
            raise InputError(f"The input is not a valid .docx package: {exc}") from exc
        logger.debug("Opened package with %d parts", len(zf.namelist()))
        return cls(zf)

    def read_bytes(self, name: str) -> bytes:
        """Return a part's bytes. Raises KeyError when absent."""
        name = normalize_part_name(name)
        if name not in self._names:
            raise KeyError(name)
        try:
            return self._zf.read(name)
        except (zipfile.BadZipFile, zlib.error, OSError) as exc:
            raise InputError(f"Part {name} is unreadable: {exc}") from exc

    def read_base64(self, name: str) -> str:
        return base64.b64encode(self.read_bytes(name)).decode("ascii")
