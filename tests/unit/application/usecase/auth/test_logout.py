"""Unit tests for LogoutUseCase."""

from dishka import AsyncContainer
import pytest

from oidclink.adapter.oidc import OpenIDConnectError
from oidclink.application.usecase.auth import LogoutRequest, LogoutUseCase
from oidclink.config import Settings
from oidclink.domain.service import OpenIDConnectClient, SessionTokenService
from oidclink.domain.value import SessionId
from tests.di import MOCK_CONFIG_ID, MOCK_PROVIDER_URL
from tests.harness import create_env_fixture, log_in

# Unit test fixture
unit_env = create_env_fixture()

SESSION = SessionId("session-1")


class TestLogoutUseCase:
    """Tests for LogoutUseCase."""

    @pytest.mark.asyncio
    async def test_local_logout(self, unit_env: AsyncContainer):
        """Without single logout the user lands on the main page."""
        # Arrange
        await log_in(unit_env, SESSION)
        use_case = await unit_env.get(LogoutUseCase)
        session_tokens = await unit_env.get(SessionTokenService)

        # Act
        response = await use_case.execute(LogoutRequest(session_id=SESSION))

        # Assert
        assert response.single_logout is False
        assert response.redirect_url == "http://localhost:8000/"
        assert await session_tokens.get_user_id(SESSION) is None
        assert await session_tokens.load_tokens(SESSION) is None

    @pytest.mark.asyncio
    async def test_single_logout_redirects_to_provider(self, unit_env):
        """Single logout sends the user to the end-session endpoint."""
        # Arrange
        settings = await unit_env.get(Settings)
        settings.oidc.single_logout = True
        await log_in(unit_env, SESSION)
        use_case = await unit_env.get(LogoutUseCase)

        # Act
        response = await use_case.execute(
            LogoutRequest(session_id=SESSION, returnto="/wiki/Special:Done")
        )

        # Assert
        assert response.single_logout is True
        assert response.redirect_url.startswith(f"{MOCK_PROVIDER_URL}/logout?")
        assert "id_token_hint=mock-id-abc" in response.redirect_url
        assert (
            "post_logout_redirect_uri=http%3A%2F%2Flocalhost%3A8000%2Fwiki%2FSpecial%3ADone"
            in response.redirect_url
        )

    @pytest.mark.asyncio
    async def test_provider_failure_still_logs_out(self, unit_env, monkeypatch):
        """A failing end-session URL still clears the session."""
        # Arrange
        settings = await unit_env.get(Settings)
        settings.oidc.single_logout = True
        await log_in(unit_env, SESSION)
        clients = await unit_env.get(dict[str, OpenIDConnectClient])

        async def discovery_fails(id_token, return_url):
            raise OpenIDConnectError("Discovery failed: 503")

        monkeypatch.setattr(clients[MOCK_CONFIG_ID], "sign_out_url", discovery_fails)
        use_case = await unit_env.get(LogoutUseCase)
        session_tokens = await unit_env.get(SessionTokenService)

        # Act
        response = await use_case.execute(LogoutRequest(session_id=SESSION))

        # Assert
        assert response.single_logout is False
        assert response.redirect_url == "http://localhost:8000/"
        assert await session_tokens.get_user_id(SESSION) is None
        assert await session_tokens.load_tokens(SESSION) is None

    @pytest.mark.asyncio
    async def test_issuer_override_disables_single_logout(self, unit_env):
        """An issuer can opt out of a globally enabled single logout."""
        settings = await unit_env.get(Settings)
        settings.oidc.single_logout = True
        settings.oidc.issuers["mock"].single_logout = False
        await log_in(unit_env, SESSION)
        use_case = await unit_env.get(LogoutUseCase)

        response = await use_case.execute(LogoutRequest(session_id=SESSION))

        assert response.single_logout is False

    @pytest.mark.asyncio
    async def test_foreign_returnto_ignored(self, unit_env):
        """Return targets on other sites fall back to the main page."""
        use_case = await unit_env.get(LogoutUseCase)

        response = await use_case.execute(
            LogoutRequest(session_id=SESSION, returnto="https://evil.example.com/")
        )

        assert response.redirect_url == "http://localhost:8000/"

    @pytest.mark.asyncio
    async def test_anonymous_session(self, unit_env):
        """Logging out a session that never logged in is harmless."""
        settings = await unit_env.get(Settings)
        settings.oidc.single_logout = True
        use_case = await unit_env.get(LogoutUseCase)

        response = await use_case.execute(LogoutRequest(session_id=SESSION))

        assert response.single_logout is False
