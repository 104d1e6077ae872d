"""Payload validation and form-field conversion endpoints."""

from fastapi import APIRouter

from jwtforge.api.deps import Settings
from jwtforge.api.schemas import (
    PayloadConvertRequest,
    PayloadConvertResponse,
    PayloadTextRequest,
)
from jwtforge.payload.conversion import validate_payload_json, validate_value_type
from jwtforge.payload.model import PayloadTypeModel
from jwtforge.payload.types import PayloadValidation

router = APIRouter(prefix="/payload", tags=["payload"])


@router.post("/validate")
async def validate_payload(
    body: PayloadTextRequest, settings: Settings
) -> PayloadValidation:
    """POST /payload/validate -- syntax, shape, and size check of JSON text."""
    return validate_payload_json(body.text, settings.max_payload_bytes)


@router.post("/convert")
async def convert_payload(
    body: PayloadConvertRequest, settings: Settings
) -> PayloadConvertResponse:
    """POST /payload/convert -- apply declared types to raw form values."""
    model = PayloadTypeModel(max_payload_bytes=settings.max_payload_bytes)
    errors: dict[str, str] = {}
    for field in body.fields:
        model.add_custom_field(field.name, field.value, field.type)
        check = validate_value_type(field.value, field.type)
        if not check.valid and check.error:
            errors[field.name] = check.error
    payload = model.get_current_payload() or {}
    return PayloadConvertResponse(
        payload=payload,
        json_text=model.switch_to_json(),
        errors=errors,
    )
