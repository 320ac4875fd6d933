"""Unit tests for MigrationService."""

from datetime import datetime, timezone

import pytest

from oidclink.domain.model import User
from oidclink.domain.service import MigrationService
from oidclink.domain.value import UserId
from tests.factories import make_options, make_user

ISSUER = "https://mock-issuer.example.org"


class TestMigrateByEmail:
    """Tests for MigrationService.by_email()."""

    @pytest.mark.asyncio
    async def test_disabled_by_default(self, user_repo, link_repo):
        """Nothing is migrated unless enabled."""
        await user_repo.save(make_user(1, "Jane", email="jane@example.org"))
        service = MigrationService(link_repo)

        assert await service.by_email("jane@example.org", make_options()) is None

    @pytest.mark.asyncio
    async def test_empty_email_never_matches(self, user_repo, link_repo):
        """Accounts without email are not matched by an empty email."""
        await user_repo.save(make_user(1, "Jane", email=""))
        service = MigrationService(link_repo)
        options = make_options(migrate_users_by_email=True)

        assert await service.by_email("", options) is None
        assert await service.by_email(None, options) is None

    @pytest.mark.asyncio
    async def test_oldest_account_wins(self, user_repo, link_repo):
        """Several accounts sharing an email resolve to the oldest."""
        await user_repo.save(
            make_user(
                7,
                "Newer",
                email="shared@example.org",
                registration=datetime(2022, 5, 1, tzinfo=timezone.utc),
            )
        )
        await user_repo.save(
            make_user(
                9,
                "Older",
                email="shared@example.org",
                registration=datetime(2019, 5, 1, tzinfo=timezone.utc),
            )
        )
        service = MigrationService(link_repo)

        user = await service.by_email(
            "shared@example.org", make_options(migrate_users_by_email=True)
        )

        assert user is not None
        assert user.id == 9

    @pytest.mark.asyncio
    async def test_unknown_registration_counts_as_oldest(self, user_repo, link_repo):
        """Accounts without a registration date sort first."""
        await user_repo.save(make_user(1, "Dated", email="shared@example.org"))
        await user_repo.save(
            User(
                id=UserId(5),
                name="Undated",
                email="shared@example.org",
                registration=None,
            )
        )
        service = MigrationService(link_repo)

        user = await service.by_email(
            "shared@example.org", make_options(migrate_users_by_email=True)
        )

        assert user is not None
        assert user.name == "Undated"

    @pytest.mark.asyncio
    async def test_linked_accounts_are_skipped(self, user_repo, link_repo):
        """The oldest unlinked account is chosen."""
        await user_repo.save(make_user(1, "Old", email="shared@example.org"))
        await user_repo.save(make_user(2, "New", email="shared@example.org"))
        await link_repo.save_link(UserId(1), "someone-else", ISSUER)
        service = MigrationService(link_repo)

        user = await service.by_email(
            "shared@example.org", make_options(migrate_users_by_email=True)
        )

        assert user is not None
        assert user.id == 2

    @pytest.mark.asyncio
    async def test_repeated_lookups_agree(self, user_repo, link_repo):
        """The same account is found each time while nothing changes."""
        await user_repo.save(make_user(1, "Old", email="shared@example.org"))
        await user_repo.save(make_user(2, "New", email="shared@example.org"))
        service = MigrationService(link_repo)
        options = make_options(migrate_users_by_email=True)

        first = await service.by_email("shared@example.org", options)
        second = await service.by_email("shared@example.org", options)

        assert first is not None
        assert first.id == second.id == 1


class TestMigrateByUsername:
    """Tests for MigrationService.by_username()."""

    @pytest.mark.asyncio
    async def test_disabled_by_default(self, user_repo, link_repo):
        """Nothing is migrated unless enabled."""
        await user_repo.save(make_user(1, "Jane"))
        service = MigrationService(link_repo)

        assert await service.by_username("Jane", make_options()) is None

    @pytest.mark.asyncio
    async def test_matches_canonical_name(self, user_repo, link_repo):
        """The candidate is canonicalized before lookup."""
        await user_repo.save(make_user(3, "Jane doe"))
        service = MigrationService(link_repo)

        user_id = await service.by_username(
            "jane_doe", make_options(migrate_users_by_username=True)
        )

        assert user_id == 3

    @pytest.mark.asyncio
    async def test_linked_account_not_matched(self, user_repo, link_repo):
        """An account with a link is never migrated again."""
        await user_repo.save(make_user(3, "Jane"))
        await link_repo.save_link(UserId(3), "other", ISSUER)
        service = MigrationService(link_repo)

        user_id = await service.by_username(
            "Jane", make_options(migrate_users_by_username=True)
        )

        assert user_id is None

    @pytest.mark.asyncio
    async def test_invalid_candidate(self, link_repo):
        """Invalid or missing candidates never match."""
        service = MigrationService(link_repo)
        options = make_options(migrate_users_by_username=True)

        assert await service.by_username(None, options) is None
        assert await service.by_username("Jane#1", options) is None
