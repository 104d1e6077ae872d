"""FastAPI dependencies exposing the process-wide cipher, engine, and settings."""

from typing import Annotated

from fastapi import Depends, Request

from jwtforge.core.settings import ForgeSettings
from jwtforge.crypto.cipher import AtRestCipher
from jwtforge.tokens.engine import TokenEngine


def get_settings(request: Request) -> ForgeSettings:
    return request.app.state.settings


def get_cipher(request: Request) -> AtRestCipher:
    """The cipher built once in the application lifespan."""
    return request.app.state.cipher


def get_engine(request: Request) -> TokenEngine:
    return request.app.state.engine


Settings = Annotated[ForgeSettings, Depends(get_settings)]
Cipher = Annotated[AtRestCipher, Depends(get_cipher)]
Engine = Annotated[TokenEngine, Depends(get_engine)]
