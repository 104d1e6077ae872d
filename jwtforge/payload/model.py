"""Payload editing state shared by the form editor and the JSON editor.

Form edits are stored verbatim; a field's declared type is applied only when
the type itself changes or when the payload is read out for signing or for
the JSON view. This keeps half-typed input such as ``"4"`` on the way to
``"42"`` or ``"-"`` on the way to ``"-1"`` intact while the user types.
"""

import json
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from jwtforge.core.errors import TypeConversionError
from jwtforge.payload.conversion import (
    MAX_PAYLOAD_BYTES,
    convert_value,
    infer_type,
    payload_byte_size,
    validate_payload_json,
)
from jwtforge.payload.types import (
    EditorMode,
    FieldType,
    FormMode,
    JsonMode,
    PayloadField,
    PayloadValidation,
    ValueValidation,
)

logger = logging.getLogger(__name__)

JSON_INDENT = 2


class WrongModeError(RuntimeError):
    """An operation was used in the editing mode it does not belong to."""


def fields_from_payload(payload: Mapping[str, Any]) -> dict[str, PayloadField]:
    """Build typed fields from a parsed payload, inferring each type."""
    return {
        name: PayloadField(name=name, value=value, declared_type=infer_type(value))
        for name, value in payload.items()
    }


def dump_payload(payload: Mapping[str, Any]) -> str:
    """Pretty-print a payload for the JSON editor."""
    return json.dumps(payload, indent=JSON_INDENT, ensure_ascii=False)


class PayloadTypeModel:
    """Keeps the form view and the JSON view of one payload consistent."""

    def __init__(
        self,
        initial: Mapping[str, Any] | None = None,
        max_payload_bytes: int = MAX_PAYLOAD_BYTES,
    ) -> None:
        self._max_payload_bytes = max_payload_bytes
        self._mode: EditorMode = FormMode(fields=fields_from_payload(initial or {}))

    @property
    def mode(self) -> EditorMode:
        return self._mode

    @property
    def is_json_mode(self) -> bool:
        return isinstance(self._mode, JsonMode)

    def _form(self) -> FormMode:
        if not isinstance(self._mode, FormMode):
            raise WrongModeError("Field editing is only available in form mode")
        return self._mode

    def _json(self) -> JsonMode:
        if not isinstance(self._mode, JsonMode):
            raise WrongModeError("JSON text is only available in JSON mode")
        return self._mode

    @property
    def fields(self) -> Mapping[str, PayloadField]:
        """Read-only view of the form fields."""
        return MappingProxyType(self._form().fields)

    @property
    def declared_types(self) -> dict[str, FieldType]:
        return {name: f.declared_type for name, f in self._form().fields.items()}

    @property
    def json_text(self) -> str:
        return self._json().text

    @property
    def json_error(self) -> str | None:
        return self._json().error

    # Form mode

    def update_field(self, name: str, raw_value: Any) -> None:
        """Store ``raw_value`` verbatim under ``name``."""
        fields = self._form().fields
        existing = fields.get(name)
        declared = existing.declared_type if existing else infer_type(raw_value)
        fields[name] = PayloadField(name=name, value=raw_value, declared_type=declared)

    def update_field_type(
        self, name: str, new_type: FieldType | str
    ) -> ValueValidation:
        """Change a field's declared type, converting its stored value.

        The new type is recorded even when conversion fails; the old value
        is kept so the user can correct it.
        """
        new_type = FieldType(new_type)
        fields = self._form().fields
        existing = fields.get(name)
        value = existing.value if existing else None
        result = ValueValidation(valid=True)
        try:
            value = convert_value(value, new_type)
        except TypeConversionError as exc:
            result = ValueValidation(valid=False, error=exc.message)
        fields[name] = PayloadField(name=name, value=value, declared_type=new_type)
        return result

    def add_custom_field(
        self,
        name: str,
        value: Any,
        field_type: FieldType | str = FieldType.STRING,
    ) -> bool:
        """Add a user-named field. Returns False for a blank name."""
        if not name or not name.strip():
            return False
        fields = self._form().fields
        fields[name] = PayloadField(
            name=name, value=value, declared_type=FieldType(field_type)
        )
        return True

    def remove_field(self, name: str) -> None:
        self._form().fields.pop(name, None)

    def _converted_fields(self, fields: Mapping[str, PayloadField]) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for name, field in fields.items():
            try:
                payload[name] = convert_value(field.value, field.declared_type)
            except TypeConversionError as exc:
                logger.debug("Field %s kept raw: %s", name, exc.message)
                payload[name] = field.value
        return payload

    # JSON mode

    def update_json_text(self, text: str) -> PayloadValidation:
        """Replace the JSON text and refresh its live syntax error."""
        mode = self._json()
        validation = validate_payload_json(text, self._max_payload_bytes)
        mode.text = text
        mode.error = validation.error
        return validation

    # Mode switching

    def switch_to_json(self) -> str:
        """Enter JSON mode with the converted payload pretty-printed."""
        if isinstance(self._mode, JsonMode):
            return self._mode.text
        text = dump_payload(self._converted_fields(self._mode.fields))
        self._mode = JsonMode(text=text)
        return text

    def switch_to_form(self) -> PayloadValidation:
        """Enter form mode if the JSON text holds a valid payload object.

        On failure the model stays in JSON mode with the error recorded.
        """
        if isinstance(self._mode, FormMode):
            return self.validate()
        mode = self._mode
        validation = validate_payload_json(mode.text, self._max_payload_bytes)
        if not validation.valid or validation.data is None:
            mode.error = validation.error
            return validation
        self._mode = FormMode(fields=fields_from_payload(validation.data))
        return validation

    # Read-out

    def get_current_payload(self) -> dict[str, Any] | None:
        """Return the payload to sign, or None when the JSON text is invalid."""
        if isinstance(self._mode, FormMode):
            return self._converted_fields(self._mode.fields)
        validation = validate_payload_json(self._mode.text, self._max_payload_bytes)
        return validation.data if validation.valid else None

    def validate(self) -> PayloadValidation:
        """Check the current payload's shape and size in either mode."""
        if isinstance(self._mode, JsonMode):
            return validate_payload_json(self._mode.text, self._max_payload_bytes)
        payload = self._converted_fields(self._mode.fields)
        text = json.dumps(payload, ensure_ascii=False)
        return validate_payload_json(text, self._max_payload_bytes)

    def reset(self, payload: Mapping[str, Any] | None = None) -> None:
        """Return to form mode holding ``payload``."""
        self._mode = FormMode(fields=fields_from_payload(payload or {}))

    def size(self) -> int:
        """UTF-8 size of the current payload as compact JSON."""
        payload = self.get_current_payload()
        if payload is None:
            return payload_byte_size(self._json().text)
        return payload_byte_size(json.dumps(payload, ensure_ascii=False))
