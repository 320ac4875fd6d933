"""migrate_legacy_subject_issuer

Move subject and issuer from the users table into openid_connect on
installations that still have the old column layout. A no-op elsewhere.

Revision ID: 9e4b6d21c8a5
Revises: 3c1f0a7d2b4e
Create Date: 2026-10-12 10:31:47.902115

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from oidclink.persistence.legacy import migrate_subject_and_issuer_from_user_table


# revision identifiers, used by Alembic.
revision: str = "9e4b6d21c8a5"
down_revision: Union[str, Sequence[str], None] = "3c1f0a7d2b4e"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    migrate_subject_and_issuer_from_user_table(op.get_bind())


def downgrade() -> None:
    """Downgrade schema.

    Restores the columns and copies the links back.
    """
    with op.batch_alter_table("users") as batch:
        batch.add_column(sa.Column("subject", sa.String(255), nullable=True))
        batch.add_column(sa.Column("issuer", sa.String(255), nullable=True))

    op.execute(
        """
        UPDATE users SET
            subject = (SELECT subject FROM openid_connect WHERE user_id = users.id),
            issuer = (SELECT issuer FROM openid_connect WHERE user_id = users.id)
        """
    )
