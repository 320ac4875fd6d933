"""Move identity columns out of the users table.

Older installations stored ``subject`` and ``issuer`` directly on
``users``. This copies every complete pair into ``openid_connect`` and
drops the old columns. Each step is guarded by column-existence checks,
so running it again is a no-op.
"""

import logging

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import (
    Column,
    Connection,
    Integer,
    MetaData,
    String,
    Table,
    exists,
    inspect,
    select,
)

from oidclink.persistence.tables import openid_connect_table

logger = logging.getLogger(__name__)

LEGACY_COLUMNS = ("subject", "issuer")


def has_legacy_columns(connection: Connection) -> bool:
    """Check whether the users table still has both identity columns."""
    inspector = inspect(connection)
    if not inspector.has_table("users"):
        return False
    columns = {column["name"] for column in inspector.get_columns("users")}
    for name in LEGACY_COLUMNS:
        if name not in columns:
            logger.info("No %s column found in users table", name)
            return False
    return True


def migrate_subject_and_issuer_from_user_table(
    connection: Connection, drop_columns: bool = True
) -> int:
    """Copy legacy identity columns into the link table.

    Rows with a NULL subject or issuer are skipped, as are accounts that
    already have a link.

    Args:
        connection: Open connection, inside the caller's transaction
        drop_columns: Drop the legacy columns afterwards

    Returns:
        Number of links created
    """
    if not has_legacy_columns(connection):
        return 0

    legacy_users = Table(
        "users",
        MetaData(),
        Column("id", Integer, primary_key=True),
        Column("subject", String(255)),
        Column("issuer", String(255)),
    )
    rows = select(
        legacy_users.c.id, legacy_users.c.subject, legacy_users.c.issuer
    ).where(
        legacy_users.c.subject.is_not(None),
        legacy_users.c.issuer.is_not(None),
        ~exists().where(openid_connect_table.c.user_id == legacy_users.c.id),
    )
    result = connection.execute(
        openid_connect_table.insert().from_select(
            ["user_id", "subject", "issuer"], rows
        )
    )
    migrated = max(result.rowcount, 0)
    logger.info("Migrated %d identities from users table to openid_connect", migrated)

    if drop_columns:
        op = Operations(MigrationContext.configure(connection))
        with op.batch_alter_table("users") as batch:
            for name in LEGACY_COLUMNS:
                batch.drop_column(name)
        logger.info("Dropped legacy identity columns from users table")

    return migrated
