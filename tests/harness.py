"""Test harness for unit, integration and E2E tests.

Nothing here needs external services: mocked components run in memory and
unmocked persistence runs on in-memory SQLite.
"""

from dishka import AsyncContainer
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from oidclink.application.usecase.auth import (
    AuthenticateRequest,
    AuthenticateUseCase,
    FinalizeLoginRequest,
    FinalizeLoginResponse,
    FinalizeLoginUseCase,
)
from oidclink.domain.value import SessionId
from oidclink.persistence.tables import metadata
from oidclink.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Creates the schema when persistence is unmocked
    - Yields request-scoped container for service access

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - everything mocked
        unit_env = create_env_fixture()

        # Integration tests - SQL repositories on SQLite
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_save_link(integration_env):
            repo = await integration_env.get(IdentityLinkRepository)
            ...
    """
    unmock = unmock or set()

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(unmock=unmock)

        if "persistence" in unmock:
            engine = await container.get(AsyncEngine)
            async with engine.begin() as connection:
                await connection.run_sync(metadata.create_all)

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment


async def log_in(
    env: AsyncContainer, session_id: str, code: str = "abc"
) -> FinalizeLoginResponse:
    """Run a complete mock login through the use cases.

    Args:
        env: Request container from a test environment fixture
        session_id: Host session to log in
        code: Authorization code; the mock subject is ``mock-{code}``

    Returns:
        FinalizeLoginResponse of the login
    """
    authenticate = await env.get(AuthenticateUseCase)
    finalize = await env.get(FinalizeLoginUseCase)
    result = await authenticate.execute(
        AuthenticateRequest(
            config_id="mock", code=code, state="state", session_id=SessionId(session_id)
        )
    )
    return await finalize.execute(
        FinalizeLoginRequest(
            config_id="mock", session_id=SessionId(session_id), result=result
        )
    )
