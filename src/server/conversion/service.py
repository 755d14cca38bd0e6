"""Conversion service orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from server.config import settings
from server.conversion.constants import DEFAULT_TITLE
from server.conversion.schemas import ConversionOptions
from server.exceptions import ConversionError

from docxhtml.converter import DocxToHtmlConverter, to_standalone_html
from docxhtml.errors import DocxHtmlError
from docxhtml.ir import ConvertOptions

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    html: str
    page_styles: Optional[Dict[str, Any]]
    page_styles_css: Optional[str]
    document: str


def _resolve_page_styles(options: ConversionOptions) -> bool:
    if options.extract_page_styles is not None:
        return options.extract_page_styles
    return settings.default_extract_page_styles


def convert_document(docx_bytes: bytes, options: ConversionOptions) -> ConversionResult:
    convert_options = ConvertOptions(
        extract_page_styles=_resolve_page_styles(options),
        share_base_url=settings.share_base_url,
    )
    try:
        converter = DocxToHtmlConverter.create(docx_bytes, convert_options)
        result = converter.convert()
    except DocxHtmlError as exc:
        logger.info("Rejected upload: %s", exc)
        raise ConversionError(message=str(exc)) from exc

    return ConversionResult(
        html=result.html,
        page_styles=result.page_styles.to_dict() if result.page_styles else None,
        page_styles_css=result.page_styles_css,
        document=to_standalone_html(result, title=options.title or DEFAULT_TITLE),
    )
