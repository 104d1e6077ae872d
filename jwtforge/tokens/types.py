"""Type definitions for signed and parsed JWT tokens."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class ParsedToken(BaseModel):
    """A decoded token string. Its signature has NOT been verified.

    Frozen at the field level only: ``header`` and ``payload`` are plain
    dicts decoded from ``raw`` and are not protected against mutation.
    ``raw`` is authoritative; re-parse it to recover the signed claims.
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    header: dict[str, Any]
    payload: dict[str, Any]
    signature: str


class Token(ParsedToken):
    """A token produced by signing, decoded back from its wire form."""

    generated_at: datetime


class TokenParts(BaseModel):
    """The three raw segments of a compact token."""

    header: str = ""
    payload: str = ""
    signature: str = ""


class TokenInsight(BaseModel):
    """Human-readable facts about a token's timing claims and size."""

    issued_at: str
    expires_at: str
    expires_relative: str
    expired: bool | None = None
    payload_size: int
    payload_size_display: str
