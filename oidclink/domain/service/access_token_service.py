"""Access token domain service."""

import time
from collections.abc import Callable
from typing import Any

import logfire

from oidclink.domain.service.auth_service import AuthService
from oidclink.domain.service.session_token_service import SessionTokenService
from oidclink.domain.value import ProviderTokens, SessionId

from .base import Service

# Seconds an access token is still accepted after its `exp`
EXPIRY_LEEWAY = 300


def is_access_token_current(payload: dict[str, Any] | None, now: float) -> bool:
    """Check the `exp` claim of an access token payload.

    A payload without an integer `exp` counts as expired.
    """
    if not payload:
        return False
    exp = payload.get("exp")
    if not isinstance(exp, int) or isinstance(exp, bool):
        return False
    return exp >= now - EXPIRY_LEEWAY


class AccessTokenService(Service):
    """Keeps the access token of a session usable, refreshing when needed."""

    def __init__(
        self,
        auth_service: AuthService,
        session_token_service: SessionTokenService,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize access token service.

        Args:
            auth_service: Auth service, used for refresh
            session_token_service: Session token cache
            clock: Current time in seconds since the epoch
        """
        self.auth_service = auth_service
        self.session_token_service = session_token_service
        self.clock = clock

    async def get_tokens(
        self, session_id: SessionId, config_id: str
    ) -> ProviderTokens | None:
        """Get current tokens of a session.

        Refreshes an expired access token when a refresh token is stored.

        Args:
            session_id: Host session id
            config_id: Issuer config id the session was authenticated with

        Returns:
            Current tokens, or None if the session has none or they expired
            and cannot be refreshed
        """
        tokens = await self.session_token_service.load_tokens(session_id)
        if tokens is None:
            return None
        if is_access_token_current(tokens.access_token_payload, self.clock()):
            return tokens

        if not tokens.refresh_token:
            logfire.info("Access token expired, no refresh token", config_id=config_id)
            return None

        with logfire.span("access_token_service.refresh", config_id=config_id):
            refreshed = await self.auth_service.refresh(config_id, tokens.refresh_token)
            await self.session_token_service.store_tokens(session_id, refreshed)
            logfire.info(
                "Access token refreshed",
                config_id=config_id,
                rotated=refreshed.refresh_token is not None,
            )
        return await self.session_token_service.load_tokens(session_id)

    async def get_access_token_payload(
        self, session_id: SessionId, config_id: str
    ) -> dict[str, Any] | None:
        """Get the current access token payload of a session."""
        tokens = await self.get_tokens(session_id, config_id)
        return tokens.access_token_payload if tokens else None

    async def get_attributes(
        self, session_id: SessionId, config_id: str
    ) -> dict[str, Any]:
        """Get the claims of a session: ID token overlaid with access token."""
        tokens = await self.get_tokens(session_id, config_id)
        if tokens is None:
            stored = await self.session_token_service.load_tokens(session_id)
            return dict(stored.id_token_payload) if stored else {}
        return tokens.attributes
