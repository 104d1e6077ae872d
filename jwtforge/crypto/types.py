"""Type definitions for signing algorithms, key validation, and identity."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from jwtforge.core.errors import ErrorKind


class Algorithm(StrEnum):
    """Supported JWT signing algorithms."""

    HS256 = "HS256"
    RS256 = "RS256"


class KeyValidation(BaseModel):
    """Outcome of checking a signing key for an algorithm."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    error: str | None = None
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls) -> "KeyValidation":
        return cls(valid=True)

    @classmethod
    def fail(cls, kind: ErrorKind, error: str) -> "KeyValidation":
        return cls(valid=False, error=error, kind=kind)


class MachineIdentity(BaseModel):
    """OS user and host the at-rest cipher key is derived from."""

    model_config = ConfigDict(frozen=True)

    username: str
    hostname: str

    @property
    def seed(self) -> str:
        return f"{self.username}@{self.hostname}"
