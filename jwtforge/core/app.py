"""FastAPI application factory for the local jwtforge service."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from jwtforge.api.router_keys import router as keys_router
from jwtforge.api.router_payload import router as payload_router
from jwtforge.api.router_tokens import router as tokens_router
from jwtforge.core.errors import JWTForgeError
from jwtforge.core.logging_config import configure_logging
from jwtforge.core.settings import ForgeSettings, IdentitySettings
from jwtforge.crypto.cipher import AtRestCipher, current_identity
from jwtforge.tokens.engine import TokenEngine

HTTP_BAD_REQUEST = 400


async def _forge_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, JWTForgeError)
    return JSONResponse(
        {"error": str(exc.kind), "message": exc.message},
        status_code=HTTP_BAD_REQUEST,
    )


def create_app(cipher: AtRestCipher | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    ``cipher`` replaces the machine-derived cipher, e.g. in tests.
    """
    settings = ForgeSettings()
    configure_logging(settings.log_level, settings.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield

    app = FastAPI(
        title="jwtforge",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.cipher = cipher or AtRestCipher.from_identity(
        current_identity(IdentitySettings())
    )
    app.state.engine = TokenEngine()

    origins = settings.get_cors_origin_list()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["Content-Type"],
        )

    app.add_exception_handler(JWTForgeError, _forge_error_handler)

    app.include_router(keys_router)
    app.include_router(tokens_router)
    app.include_router(payload_router)

    return app
