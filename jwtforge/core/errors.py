"""Error kinds and exceptions raised by the token and cipher layers."""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Stable identifiers for every failure the core can report."""

    EMPTY_KEY = "EmptyKey"
    INVALID_BASE64 = "InvalidBase64"
    INVALID_PEM_MARKERS = "InvalidPemMarkers"
    INVALID_PEM_KEY_TYPE = "InvalidPemKeyType"
    UNKNOWN_ALGORITHM = "UnknownAlgorithm"
    ENCRYPTION_FAILURE = "EncryptionFailure"
    DECRYPTION_FAILURE = "DecryptionFailure"
    TYPE_CONVERSION_ERROR = "TypeConversionError"
    PAYLOAD_TOO_LARGE = "PayloadTooLarge"
    INVALID_JSON = "InvalidJson"
    INVALID_EXPIRATION_PRESET = "InvalidExpirationPreset"
    TOKEN_GENERATION_FAILURE = "TokenGenerationFailure"
    INVALID_TOKEN_FORMAT = "InvalidTokenFormat"
    TOKEN_PARSING_FAILURE = "TokenParsingFailure"


class JWTForgeError(Exception):
    """Base exception for jwtforge errors."""

    kind: ErrorKind = ErrorKind.TOKEN_GENERATION_FAILURE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EncryptionError(JWTForgeError):
    """The at-rest cipher could not encrypt a key."""

    kind = ErrorKind.ENCRYPTION_FAILURE


DECRYPTION_FAILURE_MESSAGE = (
    "Unable to decrypt key. This profile may have been created on a "
    "different machine or by a different user."
)


class DecryptionError(JWTForgeError):
    """An encrypted key record could not be decrypted.

    The message is always the same regardless of the underlying cause.
    """

    kind = ErrorKind.DECRYPTION_FAILURE

    def __init__(self) -> None:
        super().__init__(DECRYPTION_FAILURE_MESSAGE)


class TypeConversionError(JWTForgeError, ValueError):
    """A payload value cannot be converted to its declared type."""

    kind = ErrorKind.TYPE_CONVERSION_ERROR


class TokenGenerationError(JWTForgeError):
    """Signing a token failed."""

    kind = ErrorKind.TOKEN_GENERATION_FAILURE

    def __init__(self, message: str) -> None:
        super().__init__(f"Token generation failed: {message}")
        self.reason = message


class InvalidExpirationPresetError(TokenGenerationError):
    """The expiration string is not one of the known presets."""

    kind = ErrorKind.INVALID_EXPIRATION_PRESET

    def __init__(self, preset: str) -> None:
        super().__init__(f"Invalid expiration preset: {preset!r}")
        self.preset = preset


class TokenParsingError(JWTForgeError):
    """A token string could not be decoded for inspection."""

    kind = ErrorKind.TOKEN_PARSING_FAILURE

    def __init__(self, message: str) -> None:
        super().__init__(f"Token parsing failed: {message}")
        self.reason = message


class InvalidTokenFormatError(TokenParsingError):
    """The token is not three dot-separated Base64url segments."""

    kind = ErrorKind.INVALID_TOKEN_FORMAT

    def __init__(self) -> None:
        super().__init__("Invalid JWT format. Expected: header.payload.signature")
