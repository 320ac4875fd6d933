"""In-memory user group repository for testing."""

from oidclink.domain.repository.user_group import UserGroupRepository
from oidclink.domain.value import UserId


class InMemoryUserGroupRepository(UserGroupRepository):
    """In-memory implementation of UserGroupRepository for testing."""

    def __init__(self) -> None:
        self._groups: dict[UserId, list[str]] = {}

    async def list_groups(self, user_id: UserId) -> list[str]:
        """Get all groups of a user."""
        return list(self._groups.get(user_id, []))

    async def add_group(self, user_id: UserId, group: str) -> None:
        """Add a membership."""
        groups = self._groups.setdefault(user_id, [])
        if group not in groups:
            groups.append(group)

    async def remove_group(self, user_id: UserId, group: str) -> None:
        """Remove a membership."""
        groups = self._groups.get(user_id, [])
        if group in groups:
            groups.remove(group)
