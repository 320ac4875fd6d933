"""Session token cache domain service."""

import secrets
from typing import Any

from oidclink.domain.repository.session import SessionStore
from oidclink.domain.value import AuthContext, ProviderTokens, SessionId, UserId

from .base import Service

# Authentication session data
SUBJECT_KEY = "oidc_subject"
ISSUER_KEY = "oidc_issuer"
CONTEXT_KEY = "oidc_auth_context"
STATE_KEY = "oidc_state"

# Session secrets
ACCESS_TOKEN_KEY = "oidc_access_token"
ACCESS_TOKEN_FULL_KEY = "oidc_access_token_full"
ID_TOKEN_KEY = "oidc_id_token"
ID_TOKEN_PAYLOAD_KEY = "oidc_id_token_payload"
REFRESH_TOKEN_KEY = "oidc_refresh_token"


class SessionTokenService(Service):
    """Typed access to the OpenID Connect state kept in a host session."""

    def __init__(self, session_store: SessionStore) -> None:
        """Initialize session token service.

        Args:
            session_store: Host session store
        """
        self.session_store = session_store

    async def store_identity(
        self, session_id: SessionId, subject: str, issuer: str
    ) -> None:
        """Remember the asserted identity until the account is linked."""
        await self.session_store.set_data(session_id, SUBJECT_KEY, subject)
        await self.session_store.set_data(session_id, ISSUER_KEY, issuer)

    async def get_identity(
        self, session_id: SessionId
    ) -> tuple[str | None, str | None]:
        """Get the (subject, issuer) remembered for a session."""
        subject = await self.session_store.get_data(session_id, SUBJECT_KEY)
        issuer = await self.session_store.get_data(session_id, ISSUER_KEY)
        return subject, issuer

    async def store_tokens(self, session_id: SessionId, tokens: ProviderTokens) -> None:
        """Store the tokens of a handshake or refresh.

        A missing refresh token leaves the stored one in place, so that
        providers which do not rotate refresh tokens keep working.
        """
        await self.session_store.set_secret(
            session_id, ACCESS_TOKEN_KEY, tokens.access_token_payload
        )
        await self.session_store.set_secret(
            session_id, ACCESS_TOKEN_FULL_KEY, tokens.access_token
        )
        if tokens.id_token is not None:
            await self.session_store.set_secret(session_id, ID_TOKEN_KEY, tokens.id_token)
            await self.session_store.set_secret(
                session_id, ID_TOKEN_PAYLOAD_KEY, tokens.id_token_payload
            )
        if tokens.refresh_token is not None:
            await self.session_store.set_secret(
                session_id, REFRESH_TOKEN_KEY, tokens.refresh_token
            )

    async def load_tokens(self, session_id: SessionId) -> ProviderTokens | None:
        """Get the stored tokens of a session, or None if there are none."""
        access_token = await self.session_store.get_secret(
            session_id, ACCESS_TOKEN_FULL_KEY
        )
        if access_token is None:
            return None

        return ProviderTokens(
            access_token=access_token,
            access_token_payload=await self._get_dict(session_id, ACCESS_TOKEN_KEY),
            id_token=await self.session_store.get_secret(session_id, ID_TOKEN_KEY),
            id_token_payload=await self._get_dict(session_id, ID_TOKEN_PAYLOAD_KEY),
            refresh_token=await self.session_store.get_secret(
                session_id, REFRESH_TOKEN_KEY
            ),
        )

    async def get_id_token(self, session_id: SessionId) -> str | None:
        """Get the raw ID token of a session."""
        return await self.session_store.get_secret(session_id, ID_TOKEN_KEY)

    async def store_state(
        self, session_id: SessionId, config_id: str, state: str
    ) -> None:
        """Remember the state of a pending authorization request."""
        await self.session_store.set_data(
            session_id, STATE_KEY, {"config_id": config_id, "state": state}
        )

    async def check_state(
        self, session_id: SessionId, config_id: str, state: str
    ) -> bool:
        """Consume the pending state and tell whether the callback matches it.

        The pending state is forgotten either way, so a callback can only
        be accepted once.
        """
        pending = await self.session_store.get_data(session_id, STATE_KEY)
        await self.session_store.set_data(session_id, STATE_KEY, None)
        if not pending:
            return False
        return pending.get("config_id") == config_id and secrets.compare_digest(
            str(pending.get("state", "")), state
        )

    async def login(
        self, session_id: SessionId, user_id: UserId, context: AuthContext
    ) -> None:
        """Bind a session to an account and record how it was authenticated."""
        await self.session_store.bind_user(session_id, user_id)
        await self.session_store.set_data(
            session_id, CONTEXT_KEY, context.model_dump(mode="json")
        )

    async def get_user_id(self, session_id: SessionId) -> UserId | None:
        """Get the account a session is logged in to."""
        return await self.session_store.get_user_id(session_id)

    async def get_context(self, session_id: SessionId) -> AuthContext | None:
        """Get how a session was authenticated, or None if it is not."""
        data = await self.session_store.get_data(session_id, CONTEXT_KEY)
        if data is None:
            return None
        return AuthContext.model_validate(data)

    async def rotate(self, session_id: SessionId) -> SessionId:
        """Move a session to a fresh id and return it.

        Called once a login succeeds, so that an id known before the login
        does not become a logged-in session.
        """
        new_session_id = SessionId(secrets.token_urlsafe(32))
        await self.session_store.rotate(session_id, new_session_id)
        return new_session_id

    async def clear(self, session_id: SessionId) -> None:
        """Forget everything about a session."""
        await self.session_store.clear(session_id)

    async def _get_dict(self, session_id: SessionId, key: str) -> dict[str, Any]:
        value = await self.session_store.get_secret(session_id, key)
        return dict(value) if value else {}
