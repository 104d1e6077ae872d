"""Token signing and inspection endpoints."""

import json

from fastapi import APIRouter
from starlette.responses import JSONResponse

from jwtforge.api.deps import Cipher, Engine, Settings
from jwtforge.api.schemas import ErrorResponse, ParseRequest, ParseResponse, SignRequest
from jwtforge.crypto.key_codec import validate_key
from jwtforge.payload.conversion import validate_payload_json
from jwtforge.tokens.display import describe_token
from jwtforge.tokens.types import Token

router = APIRouter(prefix="/tokens", tags=["tokens"])

HTTP_BAD_REQUEST = 400


def _rejection(error: str, message: str, size: int | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, size=size)
    return JSONResponse(
        body.model_dump(exclude_none=True), status_code=HTTP_BAD_REQUEST
    )


@router.post("/sign", response_model=None)
async def sign_token(
    body: SignRequest,
    cipher: Cipher,
    engine: Engine,
    settings: Settings,
) -> Token | JSONResponse:
    """POST /tokens/sign -- validate the key and payload, then sign."""
    key = body.key if body.key is not None else cipher.decrypt(body.encrypted_key or "")

    check = validate_key(key, body.algorithm)
    if not check.valid:
        return _rejection(str(check.kind), check.error or "Invalid key")

    payload_check = validate_payload_json(
        json.dumps(body.payload, ensure_ascii=False), settings.max_payload_bytes
    )
    if not payload_check.valid:
        return _rejection(
            str(payload_check.kind),
            payload_check.error or "Invalid payload",
            size=payload_check.size,
        )

    return engine.sign(body.algorithm, key, body.payload, body.expiration)


@router.post("/parse")
async def parse_token(body: ParseRequest, engine: Engine) -> ParseResponse:
    """POST /tokens/parse -- decode a token for display without verifying it."""
    parsed = engine.parse(body.token)
    return ParseResponse(token=parsed, insight=describe_token(parsed))
