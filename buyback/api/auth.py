"""Caller authentication for the configuration API.

Each API key is bound to exactly one account. The account a request acts as
is whatever its key resolves to; clients never name it themselves.
"""

from __future__ import annotations

import hmac
from collections.abc import Mapping

import structlog
from fastapi import Header, HTTPException, Request, status

from buyback.models.types import normalize_address

logger = structlog.get_logger()

API_KEY_HEADER = "X-API-Key"


class ApiKeyAuthenticator:
    """Resolves presented API keys to the accounts they were issued for.

    Args:
        keys: API key -> account address
    """

    def __init__(self, keys: Mapping[str, str]) -> None:
        self._keys = {
            key.strip(): normalize_address(account, validate=True)
            for key, account in keys.items()
            if key.strip()
        }

    def authenticate(self, api_key: str | None) -> str | None:
        """Account bound to the key, or None if the key is missing or unknown."""
        if not api_key:
            return None
        presented = api_key.strip()
        for stored, account in self._keys.items():
            if hmac.compare_digest(presented.encode(), stored.encode()):
                return account
        return None


def get_caller(
    request: Request,
    api_key: str | None = Header(default=None, alias=API_KEY_HEADER),
) -> str:
    """Account making a configuration call, resolved from its API key.

    The embedding service sets `app.state.authenticator`. Without one every
    configuration call is rejected. Override this in tests:
        app.dependency_overrides[get_caller] = lambda: account
    """
    authenticator: ApiKeyAuthenticator | None = getattr(
        request.app.state, "authenticator", None
    )
    caller = authenticator.authenticate(api_key) if authenticator is not None else None
    if caller is None:
        logger.warning(
            "api_caller_unauthenticated",
            path=request.url.path,
            key_presented=api_key is not None,
            authenticator_configured=authenticator is not None,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return caller


__all__ = ["API_KEY_HEADER", "ApiKeyAuthenticator", "get_caller"]
