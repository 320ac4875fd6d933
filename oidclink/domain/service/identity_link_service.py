"""Identity link domain service."""

import logfire

from oidclink.domain.model.identity_link import IdentityLink
from oidclink.domain.model.user import User
from oidclink.domain.repository.identity_link import IdentityLinkRepository
from oidclink.domain.value import UserId

from .base import Service


class IdentityLinkService(Service):
    """Domain service for reading and writing identity links."""

    def __init__(self, identity_link_repository: IdentityLinkRepository) -> None:
        """Initialize identity link service.

        Args:
            identity_link_repository: Identity link repository
        """
        self.identity_link_repository = identity_link_repository

    async def save_link(self, user_id: UserId, subject: str, issuer: str) -> None:
        """Bind an identity to an account, replacing any previous binding.

        Args:
            user_id: Local account id
            subject: `sub` claim
            issuer: Issuer URL
        """
        with logfire.span(
            "identity_link_service.save_link", user_id=user_id, issuer=issuer
        ):
            previous = await self.identity_link_repository.find_link_by_user_id(
                user_id
            )
            await self.identity_link_repository.save_link(user_id, subject, issuer)
            if previous and (previous.subject, previous.issuer) != (subject, issuer):
                logfire.warn(
                    "Identity link replaced",
                    user_id=user_id,
                    previous_issuer=previous.issuer,
                    issuer=issuer,
                )
            else:
                logfire.info("Identity linked", user_id=user_id, issuer=issuer)

    async def find_user(self, subject: str, issuer: str) -> User | None:
        """Find the account linked to an identity.

        Args:
            subject: `sub` claim
            issuer: Issuer URL

        Returns:
            The linked account, None if the identity is unknown
        """
        with logfire.span(
            "identity_link_service.find_user", subject=subject, issuer=issuer
        ):
            user = await self.identity_link_repository.find_user_by_identity(
                subject, issuer
            )
            if user:
                logfire.info("Linked user found", user_id=user.id, issuer=issuer)
            else:
                logfire.info("No linked user", subject=subject, issuer=issuer)
            return user

    async def get_link(self, user_id: UserId) -> IdentityLink | None:
        """Get the link of an account, None if it has none."""
        return await self.identity_link_repository.find_link_by_user_id(user_id)
