"""User repository implementation using PostgreSQL."""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from oidclink.domain.model.user import User
from oidclink.domain.repository.user import UserRepository
from oidclink.domain.value import UserId
from oidclink.persistence.mappers import row_to_user, user_to_dict
from oidclink.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> User | None:
        """Find user by ID."""
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_user(row)

    async def find_by_name(self, name: str) -> User | None:
        """Find user by canonical username."""
        stmt = select(users_table).where(users_table.c.name == name)
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_user(row)

    async def create(
        self, name: str, real_name: str | None = None, email: str | None = None
    ) -> User:
        """Insert a new account.

        A concurrent registration of the same name fails on the unique
        constraint of users.name.
        """
        registration = datetime.now(timezone.utc)
        stmt = users_table.insert().values(
            name=name, real_name=real_name, email=email, registration=registration
        )
        result = await self.session.execute(stmt)
        await self.session.flush()

        return User(
            id=UserId(result.inserted_primary_key[0]),
            name=name,
            real_name=real_name,
            email=email,
            registration=registration,
        )

    async def save(self, user: User) -> User:
        """Update an existing account."""
        values = user_to_dict(user)
        values.pop("id")
        stmt = users_table.update().where(users_table.c.id == user.id).values(**values)
        await self.session.execute(stmt)
        await self.session.flush()
        return user
