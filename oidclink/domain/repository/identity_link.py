"""Identity link repository interface."""

from abc import ABC, abstractmethod

from oidclink.domain.model.identity_link import IdentityLink
from oidclink.domain.model.user import User
from oidclink.domain.value import UserId


class IdentityLinkRepository(ABC):
    """Repository for the account to (subject, issuer) association.

    Lookups that find nothing return None; storage failures propagate.
    """

    @abstractmethod
    async def save_link(self, user_id: UserId, subject: str, issuer: str) -> None:
        """Create or overwrite the link of an account.

        Args:
            user_id: Local account id
            subject: `sub` claim asserted by the issuer
            issuer: Issuer URL
        """
        pass

    @abstractmethod
    async def find_link_by_user_id(self, user_id: UserId) -> IdentityLink | None:
        """Get the link of an account.

        Args:
            user_id: Local account id

        Returns:
            The link if the account has one, None otherwise
        """
        pass

    @abstractmethod
    async def find_user_by_identity(self, subject: str, issuer: str) -> User | None:
        """Find the account linked to an identity.

        Args:
            subject: `sub` claim
            issuer: Issuer URL

        Returns:
            The linked account if any, None otherwise
        """
        pass

    @abstractmethod
    async def find_unlinked_user_by_username(self, username: str) -> UserId | None:
        """Find an account by name that has no link yet.

        Args:
            username: Canonical username

        Returns:
            The account id if it exists and is unlinked, None otherwise
        """
        pass

    @abstractmethod
    async def find_unlinked_user_by_email(self, email: str) -> User | None:
        """Find the oldest-registered unlinked account with an email address.

        Args:
            email: Email address (exact match)

        Returns:
            The account if found, None otherwise
        """
        pass
