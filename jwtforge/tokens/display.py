"""Formatting helpers for showing tokens, timestamps, and payload sizes."""

import json
from datetime import UTC, datetime
from typing import Any

from jwtforge.tokens.types import ParsedToken, TokenInsight, TokenParts

NOT_AVAILABLE = "N/A"
TIMESTAMP_FORMAT = "%b %d, %Y, %H:%M:%S UTC"

MINUTE = 60
HOUR = 3600
DAY = 86400
KIB = 1024
MIB = 1024 * 1024


def _epoch_now() -> int:
    return int(datetime.now(UTC).timestamp())


def format_timestamp(timestamp: Any) -> str:
    """Format a Unix timestamp (seconds) as a UTC date string."""
    if not timestamp or isinstance(timestamp, bool):
        return NOT_AVAILABLE
    try:
        return datetime.fromtimestamp(float(timestamp), UTC).strftime(TIMESTAMP_FORMAT)
    except (OverflowError, OSError, ValueError, TypeError):
        return "Invalid Date"


def _span(seconds: int) -> str:
    if seconds < MINUTE:
        return f"{seconds} seconds"
    if seconds < HOUR:
        return f"{seconds // MINUTE} minutes"
    if seconds < DAY:
        return f"{seconds // HOUR} hours"
    return f"{seconds // DAY} days"


def format_expiration_relative(exp: Any, now: int | None = None) -> str:
    """Describe an ``exp`` claim relative to now, e.g. ``expires in 2 hours``."""
    if not isinstance(exp, (int, float)) or isinstance(exp, bool) or not exp:
        return NOT_AVAILABLE
    now = _epoch_now() if now is None else now
    diff = int(exp) - now
    if diff < 0:
        return f"expired {_span(-diff)} ago"
    return f"expires in {_span(diff)}"


def split_token(token: str | None) -> TokenParts:
    """Split a compact token into its raw segments for display."""
    if not token or not isinstance(token, str):
        return TokenParts()
    parts = token.split(".")
    if len(parts) != 3:
        return TokenParts(header=token)
    return TokenParts(header=parts[0], payload=parts[1], signature=parts[2])


def format_json(obj: Any) -> str:
    """Pretty-print an object as JSON."""
    try:
        return json.dumps(obj, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return json.dumps({"error": "Unable to format JSON"})


def payload_size(payload: Any) -> int:
    """Size in UTF-8 bytes of a payload serialized as compact JSON."""
    try:
        text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return 0
    return len(text.encode("utf-8"))


def format_bytes(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    if size < KIB:
        return f"{size} Bytes"
    if size < MIB:
        return f"{size / KIB:.2f} KB"
    return f"{size / MIB:.2f} MB"


def describe_token(token: ParsedToken, now: int | None = None) -> TokenInsight:
    """Summarise a token's ``iat``/``exp`` claims and payload size."""
    now = _epoch_now() if now is None else now
    exp = token.payload.get("exp")
    expired = None
    if isinstance(exp, (int, float)) and not isinstance(exp, bool):
        expired = exp <= now
    size = payload_size(token.payload)
    return TokenInsight(
        issued_at=format_timestamp(token.payload.get("iat")),
        expires_at=format_timestamp(exp),
        expires_relative=format_expiration_relative(exp, now),
        expired=expired,
        payload_size=size,
        payload_size_display=format_bytes(size),
    )
