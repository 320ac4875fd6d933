"""Unit tests for BackchannelLogoutUseCase."""

from dishka import AsyncContainer
import pytest

from oidclink.application.usecase.auth import (
    BackchannelLogoutRequest,
    BackchannelLogoutUseCase,
)
from oidclink.domain.service import SessionTokenService
from oidclink.domain.value import SessionId
from oidclink.util.error import ConfigurationError
from tests.di import MOCK_CONFIG_ID
from tests.harness import create_env_fixture, log_in

# Unit test fixture
unit_env = create_env_fixture()


def request(logout_token: str) -> BackchannelLogoutRequest:
    return BackchannelLogoutRequest(config_id=MOCK_CONFIG_ID, logout_token=logout_token)


class TestBackchannelLogoutUseCase:
    """Tests for BackchannelLogoutUseCase."""

    @pytest.mark.asyncio
    async def test_invalidates_all_sessions_of_user(self, unit_env: AsyncContainer):
        """Every session of the linked user is logged out."""
        # Arrange
        await log_in(unit_env, "session-a")
        await log_in(unit_env, "session-b")
        use_case = await unit_env.get(BackchannelLogoutUseCase)
        session_tokens = await unit_env.get(SessionTokenService)

        # Act
        response = await use_case.execute(request("logout:mock-abc"))

        # Assert
        assert response.status_code == 200
        assert response.error is None
        assert response.sessions_invalidated == 2
        assert await session_tokens.get_user_id(SessionId("session-a")) is None
        assert await session_tokens.get_user_id(SessionId("session-b")) is None

    @pytest.mark.asyncio
    async def test_other_users_untouched(self, unit_env):
        """Sessions of other identities stay logged in."""
        await log_in(unit_env, "session-a", code="abc")
        other = await log_in(unit_env, "session-b", code="xyz")
        use_case = await unit_env.get(BackchannelLogoutUseCase)
        session_tokens = await unit_env.get(SessionTokenService)

        await use_case.execute(request("logout:mock-abc"))

        assert await session_tokens.get_user_id(SessionId("session-b")) == other.user_id

    @pytest.mark.asyncio
    async def test_unverified_token(self, unit_env):
        """A token that fails verification is rejected with 400."""
        use_case = await unit_env.get(BackchannelLogoutUseCase)

        response = await use_case.execute(request("garbage"))

        assert response.status_code == 400
        assert response.error == "not-verified"

    @pytest.mark.asyncio
    async def test_unknown_subject(self, unit_env):
        """A verified token for an unlinked identity succeeds quietly."""
        use_case = await unit_env.get(BackchannelLogoutUseCase)

        response = await use_case.execute(request("logout:nobody"))

        assert response.status_code == 200
        assert response.sessions_invalidated == 0

    @pytest.mark.asyncio
    async def test_unknown_issuer(self, unit_env):
        """An unconfigured config id is a configuration error."""
        use_case = await unit_env.get(BackchannelLogoutUseCase)

        with pytest.raises(ConfigurationError):
            await use_case.execute(
                BackchannelLogoutRequest(config_id="nope", logout_token="logout:x")
            )
