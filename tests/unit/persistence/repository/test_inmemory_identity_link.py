"""Unit tests for the in-memory identity link repository."""

import pytest

from oidclink.domain.value import UserId
from tests.factories import make_user

ISSUER = "https://mock-issuer.example.org"


class TestInMemoryIdentityLinkRepository:
    """Tests for InMemoryIdentityLinkRepository."""

    @pytest.mark.asyncio
    async def test_save_link_replaces_existing(self, user_repo, link_repo):
        """An account has at most one link."""
        await user_repo.save(make_user(1, "Jane"))
        await link_repo.save_link(UserId(1), "old-sub", ISSUER)

        await link_repo.save_link(UserId(1), "new-sub", ISSUER)

        link = await link_repo.find_link_by_user_id(UserId(1))
        assert link is not None
        assert link.subject == "new-sub"
        assert await link_repo.find_user_by_identity("old-sub", ISSUER) is None

    @pytest.mark.asyncio
    async def test_identity_lookup_requires_issuer_match(self, user_repo, link_repo):
        """The same subject at another issuer is a different identity."""
        await user_repo.save(make_user(1, "Jane"))
        await link_repo.save_link(UserId(1), "sub", ISSUER)

        user = await link_repo.find_user_by_identity("sub", ISSUER)

        assert user is not None
        assert user.name == "Jane"
        assert await link_repo.find_user_by_identity("sub", "https://other") is None
