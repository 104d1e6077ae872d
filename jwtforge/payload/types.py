"""Type definitions for payload fields, editing modes, and validation results."""

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from jwtforge.core.errors import ErrorKind


class FieldType(StrEnum):
    """Declared type of a payload field."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"


class PayloadField(BaseModel):
    """A payload entry: the raw value as edited plus its declared type."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: Any = None
    declared_type: FieldType = FieldType.STRING


class FormMode(BaseModel):
    """Structured editing: one typed field per payload key."""

    kind: Literal["form"] = "form"
    fields: dict[str, PayloadField] = Field(default_factory=dict)


class JsonMode(BaseModel):
    """Free-form editing of the payload as JSON text."""

    kind: Literal["json"] = "json"
    text: str = "{}"
    error: str | None = None


EditorMode = FormMode | JsonMode


class ValueValidation(BaseModel):
    """Outcome of checking a single value against a declared type."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    error: str | None = None


class PayloadValidation(BaseModel):
    """Outcome of checking payload JSON text."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    error: str | None = None
    kind: ErrorKind | None = None
    data: dict[str, Any] | None = None
    size: int = 0
