"""unique_username

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 09:40:02.000000

"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, Sequence[str], None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Fails on databases that already hold duplicate usernames; those rows
    # have to be resolved by hand before upgrading.
    op.create_index("uq_users_username", "users", ["username"], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("uq_users_username", table_name="users")
