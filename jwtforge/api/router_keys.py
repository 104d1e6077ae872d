"""Key validation and at-rest encryption endpoints."""

from fastapi import APIRouter

from jwtforge.api.deps import Cipher
from jwtforge.api.schemas import (
    DecryptRequest,
    DecryptResponse,
    EncryptRequest,
    EncryptResponse,
    KeyValidateRequest,
)
from jwtforge.crypto.key_codec import validate_key
from jwtforge.crypto.types import KeyValidation

router = APIRouter(prefix="/keys", tags=["keys"])


@router.post("/validate")
async def validate_signing_key(body: KeyValidateRequest) -> KeyValidation:
    """POST /keys/validate -- check key format for an algorithm."""
    return validate_key(body.key, body.algorithm)


@router.post("/encrypt")
async def encrypt_signing_key(body: EncryptRequest, cipher: Cipher) -> EncryptResponse:
    """POST /keys/encrypt -- produce an at-rest record for storage."""
    return EncryptResponse(record=cipher.encrypt(body.plaintext))


@router.post("/decrypt")
async def decrypt_signing_key(body: DecryptRequest, cipher: Cipher) -> DecryptResponse:
    """POST /keys/decrypt -- recover a stored key on this machine."""
    return DecryptResponse(plaintext=cipher.decrypt(body.record))
