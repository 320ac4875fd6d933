"""SQLAlchemy table definitions.

They match the schema defined in Alembic migrations. Column types are
generic so the same tables run on PostgreSQL and on SQLite in tests.
"""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
)

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE (host accounts)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),  # Canonical username
    Column("real_name", String(255), nullable=True),
    Column("email", String(255), nullable=True),
    # NULL for accounts imported without a registration date
    Column("registration", DateTime(timezone=True), nullable=True),
)

Index("idx_users_email", users_table.c.email)

# ============================================================================
# USER GROUPS TABLE
# ============================================================================
user_groups_table = Table(
    "user_groups",
    metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("group_name", String(255), primary_key=True),
)

# ============================================================================
# OPENID CONNECT LINK TABLE (one row per linked account)
# ============================================================================
openid_connect_table = Table(
    "openid_connect",
    metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("subject", String(255), nullable=False),  # `sub` claim
    Column("issuer", String(255), nullable=False),  # Issuer URL
)

Index(
    "idx_openid_connect_subject_issuer",
    openid_connect_table.c.subject,
    openid_connect_table.c.issuer,
)
