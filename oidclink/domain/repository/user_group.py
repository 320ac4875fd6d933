"""User group repository interface."""

from abc import ABC, abstractmethod

from oidclink.domain.value import UserId


class UserGroupRepository(ABC):
    """Repository for group memberships of local accounts."""

    @abstractmethod
    async def list_groups(self, user_id: UserId) -> list[str]:
        """Get all groups of a user.

        Args:
            user_id: The user's unique identifier

        Returns:
            Group names (may be empty)
        """
        pass

    @abstractmethod
    async def add_group(self, user_id: UserId, group: str) -> None:
        """Add a user to a group. Adding an existing membership is a no-op."""
        pass

    @abstractmethod
    async def remove_group(self, user_id: UserId, group: str) -> None:
        """Remove a user from a group. Removing a missing membership is a no-op."""
        pass
