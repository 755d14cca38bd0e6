"""Conversion API routes."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool

from server.config import settings
from server.conversion.constants import DOCX_CONTENT_TYPES
from server.conversion.dependencies import parse_options
from server.conversion.schemas import ConversionOptions, ConversionResponse
from server.conversion.service import convert_document
from server.exceptions import UploadTooLarge


router = APIRouter(prefix="/convert", tags=["conversion"])


def _validate_upload(upload: UploadFile, label: str) -> None:
    if not upload.filename:
        raise HTTPException(status_code=400, detail=f"Missing {label} filename")
    if upload.content_type and upload.content_type not in DOCX_CONTENT_TYPES:
        raise HTTPException(status_code=415, detail=f"Unsupported {label} content type: {upload.content_type}")


def _ensure_bytes(data: bytes, label: str) -> bytes:
    if not data:
        raise HTTPException(status_code=400, detail=f"{label} is empty")
    if len(data) > settings.max_upload_bytes:
        raise UploadTooLarge(message=f"{label} exceeds {settings.max_upload_bytes} bytes")
    return data


@router.post("", response_model=ConversionResponse)
async def convert_to_json(
    docx: UploadFile = File(...),
    options: ConversionOptions = Depends(parse_options),
):
    _validate_upload(docx, "docx")
    docx_bytes = _ensure_bytes(await docx.read(), "docx")

    result = await run_in_threadpool(convert_document, docx_bytes, options)

    return ConversionResponse(
        html=result.html,
        page_styles=result.page_styles,
        page_styles_css=result.page_styles_css,
    )


@router.post("/html", response_class=HTMLResponse)
async def convert_to_html(
    docx: UploadFile = File(...),
    options: ConversionOptions = Depends(parse_options),
):
    _validate_upload(docx, "docx")
    docx_bytes = _ensure_bytes(await docx.read(), "docx")

    result = await run_in_threadpool(convert_document, docx_bytes, options)
    return HTMLResponse(result.document)
