"""User repository interface."""

from abc import ABC, abstractmethod

from oidclink.domain.model.user import User
from oidclink.domain.value import UserId


class UserRepository(ABC):
    """Repository for local accounts."""

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> User | None:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_name(self, name: str) -> User | None:
        """Find a user by canonical username.

        Args:
            name: Canonical username

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(
        self, name: str, real_name: str | None = None, email: str | None = None
    ) -> User:
        """Create an account, registered now.

        Args:
            name: Canonical username, must be unused
            real_name: Display name
            email: Email address

        Returns:
            The created user with its assigned id
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Update an existing account.

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass
