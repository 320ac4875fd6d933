"""In-memory identity link repository for testing."""

from datetime import datetime, timezone

from oidclink.domain.model import IdentityLink, User
from oidclink.domain.repository.identity_link import IdentityLinkRepository
from oidclink.domain.value import UserId

from .user import InMemoryUserRepository

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryIdentityLinkRepository(IdentityLinkRepository):
    """In-memory implementation of IdentityLinkRepository for testing.

    Joins against the given in-memory user repository.
    """

    def __init__(self, user_repository: InMemoryUserRepository) -> None:
        self._links: dict[UserId, IdentityLink] = {}
        self.user_repository = user_repository

    async def save_link(self, user_id: UserId, subject: str, issuer: str) -> None:
        """Upsert the link of an account."""
        self._links[user_id] = IdentityLink(
            user_id=user_id, subject=subject, issuer=issuer
        )

    async def find_link_by_user_id(self, user_id: UserId) -> IdentityLink | None:
        """Get the link of an account."""
        return self._links.get(user_id)

    async def find_user_by_identity(self, subject: str, issuer: str) -> User | None:
        """Find the account linked to (subject, issuer)."""
        for link in self._links.values():
            if link.subject == subject and link.issuer == issuer:
                return await self.user_repository.find_by_id(link.user_id)
        return None

    async def find_unlinked_user_by_username(self, username: str) -> UserId | None:
        """Find an unlinked account by name."""
        user = await self.user_repository.find_by_name(username)
        if user is None or user.id in self._links:
            return None
        return user.id

    async def find_unlinked_user_by_email(self, email: str) -> User | None:
        """Find the oldest unlinked account with an email."""
        candidates = [
            user
            for user in self.user_repository.all()
            if user.email == email and user.id not in self._links
        ]
        if not candidates:
            return None
        return min(candidates, key=lambda u: (u.registration or _EPOCH, u.id))
