"""OpenID Provider metadata discovery."""

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

REQUIRED_FIELDS = ("issuer", "authorization_endpoint", "token_endpoint", "jwks_uri")


class ProviderMetadata(BaseModel):
    """OpenID Provider metadata.

    Published at ``{provider_url}/.well-known/openid-configuration``.
    Unknown fields are kept.
    """

    model_config = ConfigDict(extra="allow")

    issuer: str
    authorization_endpoint: str
    token_endpoint: str
    jwks_uri: str
    userinfo_endpoint: str | None = None
    end_session_endpoint: str | None = None
    token_endpoint_auth_methods_supported: list[str] = ["client_secret_basic"]
    code_challenge_methods_supported: list[str] = []
    id_token_signing_alg_values_supported: list[str] = ["RS256"]


def well_known_url(provider_url: str) -> str:
    """Discovery document URL of a provider."""
    return f"{provider_url.rstrip('/')}/.well-known/openid-configuration"


async def discover_provider(
    http: httpx.AsyncClient,
    provider_url: str,
    overrides: dict[str, Any] | None = None,
    params: dict[str, str] | None = None,
) -> ProviderMetadata:
    """Discover provider metadata.

    Configured overrides win over the discovery document. When they
    already name every required endpoint, no request is made.

    Args:
        http: HTTP client to use
        provider_url: Issuer URL
        overrides: Metadata values from configuration
        params: Extra query parameters for the discovery request

    Returns:
        Parsed provider metadata

    Raises:
        httpx.HTTPError: If the discovery request fails
        pydantic.ValidationError: If the metadata is incomplete
    """
    overrides = overrides or {}
    if all(field in overrides for field in REQUIRED_FIELDS):
        return ProviderMetadata(**overrides)

    response = await http.get(well_known_url(provider_url), params=params or None)
    response.raise_for_status()

    return ProviderMetadata(**{**response.json(), **overrides})
