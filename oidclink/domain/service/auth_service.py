"""Authentication domain service."""

from typing import Any

import logfire

from oidclink.domain.value import LogoutClaims, ProviderTokens
from oidclink.util.error import ConfigurationError

from .base import Service


class OpenIDConnectClient:
    """Protocol client for one configured issuer.

    Implementations own discovery, token exchange, signature verification
    and refresh. Nothing outside the adapter layer touches JWTs directly.
    """

    @property
    def provider_url(self) -> str:
        """Issuer URL this client is configured for."""
        raise NotImplementedError

    async def initiate_authorization(self, state: str) -> str:
        """Start the authorization code flow.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect the user to
        """
        raise NotImplementedError

    async def authenticate(self, code: str, state: str) -> ProviderTokens:
        """Exchange the authorization code and verify the ID token.

        Args:
            code: Authorization code from the callback
            state: State parameter returned by the provider

        Returns:
            Tokens with verified payloads
        """
        raise NotImplementedError

    async def request_user_info(self, tokens: ProviderTokens, claim: str) -> Any:
        """Read one claim from the user-info endpoint.

        Args:
            tokens: Tokens of the current handshake
            claim: Claim name

        Returns:
            Claim value, or None if absent
        """
        raise NotImplementedError

    async def refresh_token(self, refresh_token: str) -> ProviderTokens:
        """Obtain fresh tokens with a refresh token.

        Returns:
            New tokens; ``refresh_token`` is set only if the provider rotated it
        """
        raise NotImplementedError

    async def sign_out_url(self, id_token: str | None, return_url: str) -> str:
        """Build the end-session URL for single logout."""
        raise NotImplementedError

    async def verify_logout_token(self, logout_token: str) -> LogoutClaims | None:
        """Verify a back-channel logout token.

        Returns:
            Verified claims, or None if the token does not verify
        """
        raise NotImplementedError


class AuthService(Service):
    """Domain service routing protocol calls to the configured issuer's client."""

    def __init__(self, clients: dict[str, OpenIDConnectClient]) -> None:
        """Initialize auth service.

        Args:
            clients: Map of config id to protocol client
        """
        self.clients = clients

    def client(self, config_id: str) -> OpenIDConnectClient:
        """Get the client of an issuer.

        Raises:
            ConfigurationError: If no client is configured under this id
        """
        client = self.clients.get(config_id)
        if client is None:
            raise ConfigurationError(
                f"No OpenID Connect client configured for '{config_id}'"
            )
        return client

    def provider_url(self, config_id: str) -> str:
        """Issuer URL of a configured client."""
        return self.client(config_id).provider_url

    async def initiate_login(self, config_id: str, state: str) -> str:
        """Start a login at an issuer.

        Args:
            config_id: Issuer config id
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect the user to
        """
        return await self.client(config_id).initiate_authorization(state)

    async def complete_login(
        self, config_id: str, code: str, state: str
    ) -> ProviderTokens:
        """Complete the handshake with an issuer.

        Args:
            config_id: Issuer config id
            code: Authorization code from the callback
            state: State parameter returned by the provider

        Returns:
            Tokens with verified payloads
        """
        with logfire.span("auth_service.complete_login", config_id=config_id):
            return await self.client(config_id).authenticate(code, state)

    async def get_claim(
        self, config_id: str, tokens: ProviderTokens, name: str
    ) -> Any:
        """Read a claim, verified ID token first, then user info.

        Args:
            config_id: Issuer config id
            tokens: Tokens of the current handshake
            name: Claim name

        Returns:
            Claim value, or None if neither source has it
        """
        value = tokens.verified_claim(name)
        if value:
            return value
        return await self.client(config_id).request_user_info(tokens, name)

    async def refresh(self, config_id: str, refresh_token: str) -> ProviderTokens:
        """Refresh the tokens of a session."""
        with logfire.span("auth_service.refresh", config_id=config_id):
            return await self.client(config_id).refresh_token(refresh_token)

    async def sign_out_url(
        self, config_id: str, id_token: str | None, return_url: str
    ) -> str:
        """Build the end-session URL at an issuer."""
        return await self.client(config_id).sign_out_url(id_token, return_url)

    async def verify_logout_token(
        self, config_id: str, logout_token: str
    ) -> LogoutClaims | None:
        """Verify a back-channel logout token from an issuer."""
        return await self.client(config_id).verify_logout_token(logout_token)
