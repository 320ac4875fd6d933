"""Test configuration and fixtures."""

import pytest

from oidclink.config import OpenIDConnectSettings
from oidclink.persistence.repository.inmemory import (
    InMemoryIdentityLinkRepository,
    InMemoryUserGroupRepository,
    InMemoryUserRepository,
)


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    """Empty in-memory user repository."""
    return InMemoryUserRepository()


@pytest.fixture
def link_repo(user_repo: InMemoryUserRepository) -> InMemoryIdentityLinkRepository:
    """In-memory identity link repository backed by ``user_repo``."""
    return InMemoryIdentityLinkRepository(user_repo)


@pytest.fixture
def group_repo() -> InMemoryUserGroupRepository:
    """Empty in-memory user group repository."""
    return InMemoryUserGroupRepository()


@pytest.fixture
def oidc_settings() -> OpenIDConnectSettings:
    """Settings with one issuer and no flags set."""
    return OpenIDConnectSettings.model_validate(
        {
            "issuers": {
                "mock": {
                    "client_id": "mock-client",
                    "client_secret": "mock-secret",
                    "provider_url": "https://mock-issuer.example.org",
                }
            }
        }
    )
