"""Account migration domain service.

Attaches an identity seen for the first time to an account that predates
OpenID Connect login, when the configuration allows it.
"""

import logfire

from oidclink.config import PluginOptions
from oidclink.domain.model.user import User
from oidclink.domain.repository.identity_link import IdentityLinkRepository
from oidclink.domain.value import UserId, canonicalize_username

from .base import Service


class MigrationService(Service):
    def __init__(self, identity_link_repository: IdentityLinkRepository) -> None:
        self.identity_link_repository = identity_link_repository

    async def by_email(self, email: str | None, options: PluginOptions) -> User | None:
        """Find the oldest unlinked account with this email.

        Returns None when migration by email is disabled or the email is empty.
        """
        if not options.migrate_users_by_email or not email:
            return None

        with logfire.span("migration_service.by_email"):
            user = await self.identity_link_repository.find_unlinked_user_by_email(
                email
            )
            if user:
                logfire.info("Migrating account by email", user_id=user.id)
            return user

    async def by_username(
        self, candidate: str | None, options: PluginOptions
    ) -> UserId | None:
        """Find an unlinked account named like the candidate.

        Returns None when migration by username is disabled or the candidate
        is not a valid username.
        """
        if not options.migrate_users_by_username:
            return None

        username = canonicalize_username(candidate)
        if username is None:
            return None

        with logfire.span("migration_service.by_username", username=username):
            user_id = await self.identity_link_repository.find_unlinked_user_by_username(
                username
            )
            if user_id is not None:
                logfire.info(
                    "Migrating account by username", user_id=user_id, username=username
                )
            return user_id
