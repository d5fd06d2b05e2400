"""Authentication helpers for the control plane.

This module centralizes how the bearer token is found (environment first,
then the local settings file) and builds the control-plane adapter with
it. It does not implement a login flow.
"""

from __future__ import annotations

from typing import Protocol

from edgeops.core.adapters.controlplane import ControlPlaneAdapter
from edgeops.core.config import TOKEN_ENV, ClientConfig
from edgeops.core.errors import EdgeOpsError


class AuthError(EdgeOpsError):
    """Raised when no bearer token is available."""


class TokenStore(Protocol):
    def get_token(self) -> str | None:
        ...


def _sanitize_base_url(url: str) -> str:
    """
    Normalize the control-plane base URL.

    - Removes query strings (e.g. '?org=acme')
    - Removes trailing slashes
    """
    return url.split("?", 1)[0].rstrip("/")


def get_access_token(config: ClientConfig, store: TokenStore) -> str:
    """Return the bearer token, preferring the environment override."""
    token = config.token_override or store.get_token()
    if not token:
        raise AuthError(
            "user not logged in",
            hint=f"Store a token with `edgeops auth token <token>` or set {TOKEN_ENV}.",
        )
    return token


def get_client(
    config: ClientConfig, store: TokenStore, *, require_token: bool = True
) -> ControlPlaneAdapter:
    """
    Create a control-plane adapter for the configured base URL.

    With ``require_token=False`` a missing token is tolerated and requests
    go out unauthenticated; used by shell completion, which must not fail.
    """
    if require_token:
        token: str | None = get_access_token(config, store)
    else:
        token = config.token_override or store.get_token()
    return ControlPlaneAdapter(
        _sanitize_base_url(config.api_base_url),
        token,
        timeout=config.http_timeout,
    )
