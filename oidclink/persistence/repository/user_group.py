"""UserGroup repository implementation using PostgreSQL."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from oidclink.domain.repository.user_group import UserGroupRepository
from oidclink.domain.value import UserId
from oidclink.persistence.tables import user_groups_table


class PostgresUserGroupRepository(UserGroupRepository):
    """PostgreSQL implementation of UserGroupRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def list_groups(self, user_id: UserId) -> list[str]:
        """Get all groups of a user."""
        stmt = (
            select(user_groups_table.c.group_name)
            .where(user_groups_table.c.user_id == user_id)
            .order_by(user_groups_table.c.group_name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_group(self, user_id: UserId, group: str) -> None:
        """Add a membership if it does not exist yet."""
        if group in await self.list_groups(user_id):
            return
        stmt = user_groups_table.insert().values(user_id=user_id, group_name=group)
        await self.session.execute(stmt)
        await self.session.flush()

    async def remove_group(self, user_id: UserId, group: str) -> None:
        """Remove a membership."""
        stmt = user_groups_table.delete().where(
            user_groups_table.c.user_id == user_id,
            user_groups_table.c.group_name == group,
        )
        await self.session.execute(stmt)
        await self.session.flush()
