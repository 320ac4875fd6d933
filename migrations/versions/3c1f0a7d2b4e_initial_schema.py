"""initial_schema

Create the account and identity link schema:
- Users (host accounts, unique canonical name)
- User Groups (group memberships, including synchronized oidc_ groups)
- OpenID Connect (one (subject, issuer) link per account)

Revision ID: 3c1f0a7d2b4e
Revises:
Create Date: 2026-10-12 10:14:02.418733

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1f0a7d2b4e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Installations upgraded from the column layout already have users
    if not sa.inspect(op.get_bind()).has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("real_name", sa.String(255), nullable=True),
            sa.Column("email", sa.String(255), nullable=True),
            sa.Column("registration", sa.DateTime(timezone=True), nullable=True),
            sa.UniqueConstraint("name", name="uq_users_name"),
        )
        op.create_index("idx_users_email", "users", ["email"])

    op.create_table(
        "user_groups",
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("group_name", sa.String(255), primary_key=True),
    )

    op.create_table(
        "openid_connect",
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("issuer", sa.String(255), nullable=False),
    )
    op.create_index(
        "idx_openid_connect_subject_issuer",
        "openid_connect",
        ["subject", "issuer"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_openid_connect_subject_issuer", table_name="openid_connect")
    op.drop_table("openid_connect")
    op.drop_table("user_groups")
    op.drop_index("idx_users_email", table_name="users")
    op.drop_table("users")
