"""Conversion errors.

Only two failures are fatal: an unreadable input package and a package whose
main document part is missing or malformed. Everything else degrades locally.
"""

from __future__ import annotations


class DocxHtmlError(Exception):
    """Base class for all conversion failures."""


class InputError(DocxHtmlError):
    """The input is empty or is not a readable .docx package."""


class StructureError(DocxHtmlError):
    """A required part or structural node is absent or malformed."""
