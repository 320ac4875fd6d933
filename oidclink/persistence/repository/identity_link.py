"""IdentityLink repository implementation using PostgreSQL."""

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from oidclink.domain.model import IdentityLink, User
from oidclink.domain.repository.identity_link import IdentityLinkRepository
from oidclink.domain.value import UserId
from oidclink.persistence.mappers import row_to_identity_link, row_to_user
from oidclink.persistence.tables import openid_connect_table, users_table

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class PostgresIdentityLinkRepository(IdentityLinkRepository):
    """PostgreSQL implementation of IdentityLinkRepository.

    Also runs on SQLite, which shares the upsert syntax.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def save_link(self, user_id: UserId, subject: str, issuer: str) -> None:
        """Upsert the link row of an account, keyed on user_id."""
        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_INSERTS[dialect]

        stmt = insert(openid_connect_table).values(
            user_id=user_id, subject=subject, issuer=issuer
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[openid_connect_table.c.user_id],
            set_={"subject": stmt.excluded.subject, "issuer": stmt.excluded.issuer},
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def find_link_by_user_id(self, user_id: UserId) -> IdentityLink | None:
        """Get the link row of an account."""
        stmt = select(openid_connect_table).where(
            openid_connect_table.c.user_id == user_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_identity_link(row)

    async def find_user_by_identity(self, subject: str, issuer: str) -> User | None:
        """Join users and links on an exact (subject, issuer) match."""
        stmt = (
            select(users_table)
            .join(
                openid_connect_table,
                users_table.c.id == openid_connect_table.c.user_id,
            )
            .where(
                openid_connect_table.c.subject == subject,
                openid_connect_table.c.issuer == issuer,
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_user(row)

    async def find_unlinked_user_by_username(self, username: str) -> UserId | None:
        """Find an account by name with no link row."""
        stmt = (
            select(users_table.c.id)
            .outerjoin(
                openid_connect_table,
                users_table.c.id == openid_connect_table.c.user_id,
            )
            .where(
                users_table.c.name == username,
                openid_connect_table.c.user_id.is_(None),
            )
        )
        result = await self.session.execute(stmt)
        row = result.first()

        if not row:
            return None

        return UserId(row[0])

    async def find_unlinked_user_by_email(self, email: str) -> User | None:
        """Find the oldest unlinked account with an email.

        Accounts without a registration date predate those with one.
        """
        stmt = (
            select(users_table)
            .outerjoin(
                openid_connect_table,
                users_table.c.id == openid_connect_table.c.user_id,
            )
            .where(
                users_table.c.email == email,
                openid_connect_table.c.user_id.is_(None),
            )
            .order_by(
                users_table.c.registration.asc().nulls_first(),
                users_table.c.id.asc(),
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_user(row)
