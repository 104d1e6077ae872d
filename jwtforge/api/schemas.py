"""Request and response bodies for the local jwtforge API."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from jwtforge.payload.types import FieldType
from jwtforge.tokens.types import ParsedToken, TokenInsight


class ErrorResponse(BaseModel):
    """Body returned for any rejected request."""

    error: str
    message: str
    size: int | None = None


class KeyValidateRequest(BaseModel):
    """Request body for POST /keys/validate."""

    key: str
    algorithm: str


class EncryptRequest(BaseModel):
    """Request body for POST /keys/encrypt."""

    plaintext: str


class EncryptResponse(BaseModel):
    record: str


class DecryptRequest(BaseModel):
    """Request body for POST /keys/decrypt."""

    record: str


class DecryptResponse(BaseModel):
    plaintext: str


class SignRequest(BaseModel):
    """Request body for POST /tokens/sign.

    Exactly one of ``key`` (plaintext) or ``encrypted_key`` (an at-rest
    record) must be given.
    """

    algorithm: str
    key: str | None = None
    encrypted_key: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    expiration: int | float | str

    @model_validator(mode="after")
    def _one_key_source(self) -> "SignRequest":
        if (self.key is None) == (self.encrypted_key is None):
            raise ValueError("Provide exactly one of key or encrypted_key")
        return self


class ParseRequest(BaseModel):
    """Request body for POST /tokens/parse."""

    token: str


class ParseResponse(BaseModel):
    """Decoded token plus display facts. The signature is not verified."""

    token: ParsedToken
    insight: TokenInsight


class PayloadTextRequest(BaseModel):
    """Request body for POST /payload/validate."""

    text: str


class FieldInput(BaseModel):
    """One form field as the editor holds it."""

    name: str
    value: Any = None
    type: FieldType = FieldType.STRING


class PayloadConvertRequest(BaseModel):
    """Request body for POST /payload/convert."""

    fields: list[FieldInput] = Field(default_factory=list)


class PayloadConvertResponse(BaseModel):
    """Converted payload; fields that failed conversion keep their raw value."""

    payload: dict[str, Any]
    json_text: str
    errors: dict[str, str] = Field(default_factory=dict)
