"""JWT signing and unverified decoding for HS256 and RS256."""

import json
import logging
import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from jwt.utils import base64url_decode

from jwtforge.core.errors import (
    InvalidExpirationPresetError,
    InvalidTokenFormatError,
    JWTForgeError,
    TokenGenerationError,
    TokenParsingError,
)
from jwtforge.crypto.key_codec import decode_base64_key
from jwtforge.crypto.types import Algorithm
from jwtforge.tokens.types import ParsedToken, Token

logger = logging.getLogger(__name__)

EXPIRATION_PRESETS: dict[str, int] = {
    "1h": 3600,
    "1d": 86400,
    "1w": 604800,
}

TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+")

Expiration = int | float | str


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _decode_segment(segment: str, label: str) -> dict[str, Any]:
    """Base64url-decode one token segment into a JSON object."""
    value = json.loads(base64url_decode(segment))
    if not isinstance(value, dict):
        raise ValueError(f"{label} is not a JSON object")
    return value


class TokenEngine:
    """Signs payloads into compact JWTs and decodes tokens for inspection."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock

    def sign(
        self,
        algorithm: Algorithm | str,
        key: str,
        payload: Mapping[str, Any],
        expiration: Expiration,
    ) -> Token:
        """Sign ``payload`` with ``key``.

        ``iat`` defaults to now when absent. A numeric ``expiration`` is used
        as ``exp`` as-is, past timestamps included; a preset is added to
        ``iat``.

        Raises:
            InvalidExpirationPresetError: Unknown expiration preset.
            TokenGenerationError: Any other signing failure.
        """
        try:
            return self._sign(algorithm, key, payload, expiration)
        except TokenGenerationError:
            raise
        except (
            JWTForgeError,
            jwt.PyJWTError,
            UnsupportedAlgorithm,
            ValueError,
            TypeError,
        ) as exc:
            logger.warning("Token generation failed: %s", exc)
            raise TokenGenerationError(str(exc)) from exc

    def _sign(
        self,
        algorithm: Algorithm | str,
        key: str,
        payload: Mapping[str, Any],
        expiration: Expiration,
    ) -> Token:
        try:
            alg = Algorithm(algorithm)
        except ValueError:
            raise ValueError(f"Unsupported algorithm: {algorithm}") from None

        signing_key: str | bytes | None
        signing_key = decode_base64_key(key) if alg == Algorithm.HS256 else key

        claims = dict(payload)
        if claims.get("iat") is None:
            claims["iat"] = int(self._clock().timestamp())
        claims["exp"] = self._expiration(claims["iat"], expiration)

        # Signed at the JWS layer; registered claims are not type-checked.
        body = json.dumps(claims, separators=(",", ":")).encode()
        raw = jwt.api_jws.encode(body, signing_key, algorithm=alg.value)
        signing_key = None

        decoded = self.parse(raw)
        logger.info("Signed %s token with claims %s", alg.value, sorted(claims))
        return Token(
            raw=decoded.raw,
            header=decoded.header,
            payload=decoded.payload,
            signature=decoded.signature,
            generated_at=self._clock(),
        )

    @staticmethod
    def _expiration(iat: Any, expiration: Expiration) -> Any:
        if isinstance(expiration, (int, float)) and not isinstance(expiration, bool):
            return expiration
        seconds = None
        if isinstance(expiration, str):
            seconds = EXPIRATION_PRESETS.get(expiration)
        if seconds is None:
            raise InvalidExpirationPresetError(str(expiration))
        return iat + seconds

    def parse(self, token: str) -> ParsedToken:
        """Decode a token without verifying its signature, header, or claims.

        Raises:
            InvalidTokenFormatError: Not three Base64url segments.
            TokenParsingError: Header or payload is not a Base64url JSON object.
        """
        candidate = token.strip() if isinstance(token, str) else ""
        if not TOKEN_PATTERN.fullmatch(candidate):
            raise InvalidTokenFormatError()

        header_segment, payload_segment, signature = candidate.split(".")
        try:
            header = _decode_segment(header_segment, "Header")
            payload = _decode_segment(payload_segment, "Payload")
        except ValueError as exc:
            logger.debug("Token parsing failed: %s", exc)
            raise TokenParsingError(
                f"Failed to decode token. Token may be malformed. ({exc})"
            ) from exc

        return ParsedToken(
            raw=candidate,
            header=header,
            payload=payload,
            signature=signature,
        )
