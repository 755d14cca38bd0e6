"""Conversion dependency helpers."""

from fastapi import Form, HTTPException

from server.conversion.schemas import ConversionOptions


async def parse_options(options_json: str | None = Form(default=None)) -> ConversionOptions:
    if not options_json:
        return ConversionOptions()
    try:
        return ConversionOptions.model_validate_json(options_json)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid options JSON: {exc}") from exc
