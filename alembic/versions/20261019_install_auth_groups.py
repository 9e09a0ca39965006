"""install_auth_groups

Revision ID: 3f1c2a9e7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from authgroups.core.config import get_settings

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9e7b10'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    tables = get_settings().table

    op.create_table(tables.users,
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=120), nullable=True),
        sa.Column('password', sa.String(length=81), nullable=True),
        sa.Column('password_reset_hash', sa.String(length=81), nullable=True),
        sa.Column('temp_password', sa.String(length=81), nullable=True),
        sa.Column('remember_me', sa.String(length=81), nullable=True),
        sa.Column('activation_hash', sa.String(length=81), nullable=True),
        sa.Column('ip_address', sa.String(length=40), nullable=True),
        sa.Column('last_login', sa.Integer(), nullable=True),
        sa.Column('updated_at', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.Integer(), nullable=True),
        sa.Column('status', sa.SmallInteger(), nullable=True),
        sa.Column('activated', sa.SmallInteger(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table(tables.users_metadata,
        sa.Column('user_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('first_name', sa.String(length=50), nullable=True),
        sa.Column('last_name', sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint('user_id')
    )
    op.create_table(tables.groups,
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name=f'uq_{tables.groups}_name')
    )
    op.create_table(tables.users_suspended,
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('login_id', sa.String(length=120), nullable=True),
        sa.Column('attempts', sa.Integer(), nullable=True),
        sa.Column('ip', sa.String(length=40), nullable=True),
        sa.Column('last_attempt_at', sa.Integer(), nullable=True),
        sa.Column('suspended_at', sa.Integer(), nullable=True),
        sa.Column('unsuspend_at', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table(tables.users_groups,
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('group_id', sa.Integer(), nullable=False)
    )
    with op.batch_alter_table(tables.users_metadata, schema=None) as batch_op:
        batch_op.create_index(f'ix_{tables.users_metadata}_user_id', ['user_id'], unique=False)
    with op.batch_alter_table(tables.users_groups, schema=None) as batch_op:
        batch_op.create_index(f'ix_{tables.users_groups}_user_group', ['user_id', 'group_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    tables = get_settings().table

    with op.batch_alter_table(tables.users_groups, schema=None) as batch_op:
        batch_op.drop_index(f'ix_{tables.users_groups}_user_group')
    with op.batch_alter_table(tables.users_metadata, schema=None) as batch_op:
        batch_op.drop_index(f'ix_{tables.users_metadata}_user_id')

    op.drop_table(tables.users_groups)
    op.drop_table(tables.users_suspended)
    op.drop_table(tables.groups)
    op.drop_table(tables.users_metadata)
    op.drop_table(tables.users)
