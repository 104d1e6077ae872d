"""Conversion between raw form input and typed JSON payload values."""

import json
import math
from typing import Any

from jwtforge.core.errors import ErrorKind, TypeConversionError
from jwtforge.payload.types import FieldType, PayloadValidation, ValueValidation

MAX_PAYLOAD_BYTES = 65_536

TRUE_STRINGS = frozenset({"true", "1"})
FALSE_STRINGS = frozenset({"false", "0", ""})


def to_text(value: Any) -> str:
    """Render a value the way it reads in a JSON document or form field."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def _to_number(value: Any) -> int | float:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        # int()/float() accept digit separators, JSON numbers do not
        if "_" in text:
            raise TypeConversionError(f'Cannot convert "{value}" to number')
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise TypeConversionError(f'Cannot convert "{value}" to number') from None
    else:
        raise TypeConversionError(f'Cannot convert "{to_text(value)}" to number')
    if not math.isfinite(number):
        raise TypeConversionError(f'Cannot convert "{to_text(value)}" to number')
    return int(number) if number.is_integer() else number


def _to_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    shown = "null" if value is None else to_text(value)
    text = shown.lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    raise TypeConversionError(f'Cannot convert "{shown}" to boolean')


def _to_container(value: Any, field_type: FieldType) -> Any:
    expected = dict if field_type == FieldType.OBJECT else list
    if isinstance(value, expected):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, expected):
            return parsed
    raise TypeConversionError(f'Cannot convert "{to_text(value)}" to {field_type}')


def convert_value(value: Any, field_type: FieldType | str) -> Any:
    """Convert ``value`` to ``field_type``.

    Raises:
        TypeConversionError: If the value has no sensible form in that type.
    """
    try:
        field_type = FieldType(field_type)
    except ValueError:
        raise TypeConversionError(f"Unknown type: {field_type}") from None

    if field_type == FieldType.NULL:
        return None
    if field_type == FieldType.STRING:
        return to_text(value)
    if field_type == FieldType.NUMBER:
        return _to_number(value)
    if field_type == FieldType.BOOLEAN:
        return _to_boolean(value)
    return _to_container(value, field_type)


def infer_type(value: Any) -> FieldType:
    """Infer the declared type of a parsed JSON value."""
    if value is None:
        return FieldType.NULL
    if isinstance(value, list):
        return FieldType.ARRAY
    if isinstance(value, dict):
        return FieldType.OBJECT
    if isinstance(value, bool):
        return FieldType.BOOLEAN
    if isinstance(value, (int, float)):
        return FieldType.NUMBER
    return FieldType.STRING


def validate_value_type(value: Any, field_type: FieldType | str) -> ValueValidation:
    """Check whether ``value`` converts to ``field_type`` without raising."""
    try:
        convert_value(value, field_type)
    except TypeConversionError as exc:
        return ValueValidation(valid=False, error=exc.message)
    return ValueValidation(valid=True)


def payload_byte_size(text: str) -> int:
    """Size of payload JSON text in UTF-8 bytes."""
    return len(text.encode("utf-8"))


def validate_payload_json(
    text: str, max_bytes: int = MAX_PAYLOAD_BYTES
) -> PayloadValidation:
    """Parse payload JSON text and enforce the object shape and size limit."""
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        return PayloadValidation(
            valid=False, error=f"Invalid JSON: {exc}", kind=ErrorKind.INVALID_JSON
        )

    if not isinstance(parsed, dict):
        return PayloadValidation(
            valid=False, error="JSON must be an object", kind=ErrorKind.INVALID_JSON
        )

    size = payload_byte_size(text)
    if size > max_bytes:
        return PayloadValidation(
            valid=False,
            error=(
                f"Payload too large ({round(size / 1024)}KB). "
                f"Maximum is {max_bytes // 1024}KB."
            ),
            kind=ErrorKind.PAYLOAD_TOO_LARGE,
            size=size,
        )

    return PayloadValidation(valid=True, data=parsed, size=size)
