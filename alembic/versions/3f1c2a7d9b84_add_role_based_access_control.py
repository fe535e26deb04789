"""add_role_based_access_control

Revision ID: 3f1c2a7d9b84
Revises:
Create Date: 2026-10-19 09:12:41.501223

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a7d9b84'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the access-control schema.

    Creates:
    - houses table (with hide_finances privacy flag)
    - user_roles table (one row per user, system role)
    - house_role_grants table (one row per user per house)

    Roles are stored as strings and validated by the application on read.
    """
    # 1. Create houses table
    op.create_table(
        'houses',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('hide_finances', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # 2. Create user_roles table
    op.create_table(
        'user_roles',
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('system_role', sa.String(length=32), nullable=False, server_default='regular_user'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('user_id')
    )

    # 3. Create house_role_grants table
    op.create_table(
        'house_role_grants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('house_id', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('granted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('granted_by', sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user_roles.user_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'house_id', name='uq_user_house_grant')
    )

    # 4. Add indexes for lookups by user and by house
    op.create_index('ix_house_role_grants_user_id', 'house_role_grants', ['user_id'])
    op.create_index('ix_house_role_grants_house_id', 'house_role_grants', ['house_id'])


def downgrade() -> None:
    """
    Drop the access-control schema.

    WARNING: This deletes every role record and grant.
    """
    op.drop_index('ix_house_role_grants_house_id', table_name='house_role_grants')
    op.drop_index('ix_house_role_grants_user_id', table_name='house_role_grants')
    op.drop_table('house_role_grants')
    op.drop_table('user_roles')
    op.drop_table('houses')
