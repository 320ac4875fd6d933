"""Unit tests for SessionTokenService."""

from cryptography.fernet import Fernet
import pytest

from oidclink.adapter.session import InMemorySessionStore
from oidclink.domain.service import SessionTokenService
from oidclink.domain.value import (
    AuthContext,
    AuthPlugin,
    ProviderTokens,
    SessionId,
    UserId,
)

SESSION = SessionId("session-1")


@pytest.fixture
def service() -> SessionTokenService:
    return SessionTokenService(InMemorySessionStore(Fernet(Fernet.generate_key())))


class TestSessionTokenService:
    """Tests for SessionTokenService."""

    @pytest.mark.asyncio
    async def test_stores_and_loads_tokens(self, service):
        tokens = ProviderTokens(
            access_token="at",
            access_token_payload={"exp": 10, "roles": ["a"]},
            id_token="it",
            id_token_payload={"sub": "s"},
            refresh_token="rt",
        )

        await service.store_tokens(SESSION, tokens)

        assert await service.load_tokens(SESSION) == tokens
        assert await service.get_id_token(SESSION) == "it"

    @pytest.mark.asyncio
    async def test_missing_id_and_refresh_tokens_keep_previous(self, service):
        """A refresh that returns only an access token keeps the rest."""
        await service.store_tokens(
            SESSION,
            ProviderTokens(
                access_token="at1",
                id_token="it",
                id_token_payload={"sub": "s"},
                refresh_token="rt",
            ),
        )

        await service.store_tokens(
            SESSION, ProviderTokens(access_token="at2", access_token_payload={"exp": 5})
        )

        tokens = await service.load_tokens(SESSION)
        assert tokens is not None
        assert tokens.access_token == "at2"
        assert tokens.access_token_payload == {"exp": 5}
        assert tokens.id_token == "it"
        assert tokens.refresh_token == "rt"

    @pytest.mark.asyncio
    async def test_identity(self, service):
        assert await service.get_identity(SESSION) == (None, None)

        await service.store_identity(SESSION, "sub-1", "https://issuer.example.org")

        assert await service.get_identity(SESSION) == (
            "sub-1",
            "https://issuer.example.org",
        )

    @pytest.mark.asyncio
    async def test_login_records_user_and_context(self, service):
        context = AuthContext(plugin=AuthPlugin.OPENID_CONNECT, config_id="mock")

        await service.login(SESSION, UserId(4), context)

        assert await service.get_user_id(SESSION) == 4
        assert await service.get_context(SESSION) == context

    @pytest.mark.asyncio
    async def test_state_is_single_use(self, service):
        """A pending state matches once, for its issuer only."""
        await service.store_state(SESSION, "mock", "state-1")

        assert await service.check_state(SESSION, "other", "state-1") is False
        # The failed check consumed the pending state
        assert await service.check_state(SESSION, "mock", "state-1") is False

        await service.store_state(SESSION, "mock", "state-2")
        assert await service.check_state(SESSION, "mock", "state-2") is True
        assert await service.check_state(SESSION, "mock", "state-2") is False

    @pytest.mark.asyncio
    async def test_clear(self, service):
        await service.store_identity(SESSION, "sub-1", "https://issuer.example.org")
        await service.store_tokens(SESSION, ProviderTokens(access_token="at"))

        await service.clear(SESSION)

        assert await service.get_identity(SESSION) == (None, None)
        assert await service.load_tokens(SESSION) is None

    @pytest.mark.asyncio
    async def test_rotate_moves_login_to_new_id(self, service):
        # Arrange
        context = AuthContext(plugin=AuthPlugin.OPENID_CONNECT, config_id="mock")
        await service.store_tokens(SESSION, ProviderTokens(access_token="at"))
        await service.login(SESSION, UserId(4), context)

        # Act
        new_session = await service.rotate(SESSION)

        # Assert
        assert new_session != SESSION
        assert await service.get_user_id(new_session) == 4
        assert await service.get_context(new_session) == context
        assert (await service.load_tokens(new_session)).access_token == "at"
        assert await service.get_user_id(SESSION) is None
