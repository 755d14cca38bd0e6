"""Pydantic models for conversion requests and responses."""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class ConversionOptions(BaseModel):
    extract_page_styles: Optional[bool] = None
    title: Optional[str] = None


class ConversionResponse(BaseModel):
    html: str
    page_styles: Optional[Dict[str, Any]] = None
    page_styles_css: Optional[str] = None
