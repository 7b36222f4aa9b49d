"""FastAPI application for buyback configuration.

The embedding service builds a BuybackHook with its real collaborators and an
ApiKeyAuthenticator for the accounts allowed to configure it, then passes both
to create_app() or run(). The API only exposes the configuration surface and
TWAP quotes, never payment settlement.
"""

import logging
import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from buyback.api.auth import ApiKeyAuthenticator
from buyback.api.endpoints import router
from buyback.config import configure_logging
from buyback.errors import AuthorizationError, ConfigurationError, PoolAlreadySet, PoolNotSet
from buyback.hook import BuybackHook

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("BUYBACK_HOST", "0.0.0.0")
PORT = int(os.environ.get("BUYBACK_PORT", "8000"))
DEBUG = os.environ.get("BUYBACK_DEBUG", "false").lower() in ("true", "1", "yes")


def _configuration_status(exc: ConfigurationError) -> int:
    if isinstance(exc, PoolAlreadySet):
        return 409
    if isinstance(exc, PoolNotSet):
        return 404
    return 400


def create_app(
    hook: BuybackHook | None = None,
    authenticator: ApiKeyAuthenticator | None = None,
) -> FastAPI:
    """Build the API, optionally bound to a hook and a caller authenticator.

    Without an authenticator every configuration call is rejected with 401;
    reads and quotes stay open.
    """
    app = FastAPI(
        title="Buyback Hook",
        description="Pool and TWAP configuration for the buyback hook",
        version="0.1.0",
    )
    app.state.hook = hook
    app.state.authenticator = authenticator

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        _request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=_configuration_status(exc),
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(
        _request: Request, exc: AuthorizationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=403,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, object]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "hook_configured": app.state.hook is not None,
            "auth_configured": app.state.authenticator is not None,
        }

    return app


def run(hook: BuybackHook, authenticator: ApiKeyAuthenticator) -> None:
    """Serve the configuration API for an embedder-built hook.

    Configuration via environment variables:
    - BUYBACK_HOST: Host to bind to (default: 0.0.0.0)
    - BUYBACK_PORT: Port to bind to (default: 8000)
    - BUYBACK_DEBUG: Enable debug logging (default: false)
    """
    configure_logging(logging.DEBUG if DEBUG else logging.INFO)
    uvicorn.run(create_app(hook, authenticator), host=HOST, port=PORT)
