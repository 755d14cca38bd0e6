"""Shared API exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class AppError(Exception):
    message: str
    status_code: int = 400
    code: str = "app_error"
    headers: Optional[dict[str, str]] = None


@dataclass
class ConversionError(AppError):
    status_code: int = 422
    code: str = "conversion_error"


@dataclass
class UploadTooLarge(AppError):
    status_code: int = 413
    code: str = "upload_too_large"
