"""create_core_tables

Revision ID: create_core_tables
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'create_core_tables'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create badges, users_profile and users_badge tables."""
    op.create_table(
        'badges',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_badges'),
        sa.UniqueConstraint('name', name='uq_badges_name'),
    )

    # user_id references the identity directory, so it carries no foreign key.
    op.create_table(
        'users_profile',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('fullname', sa.String(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('identity_image_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_users_profile'),
        sa.UniqueConstraint('user_id', name='users_profile_unique_user_id'),
    )

    op.create_table(
        'users_badge',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('badge_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['badge_id'], ['badges.id'], ondelete='CASCADE', name='fk_users_badge_badge_id'),
        sa.PrimaryKeyConstraint('id', name='pk_users_badge'),
        sa.UniqueConstraint('user_id', 'badge_id', name='users_badge_unique_user_badge'),
    )
    op.create_index('ix_users_badge_user_id', 'users_badge', ['user_id'])

    badges = sa.table(
        'badges',
        sa.column('id', sa.Uuid()),
        sa.column('name', sa.String()),
        sa.column('description', sa.Text()),
    )
    op.bulk_insert(badges, [
        {'id': uuid.uuid4(), 'name': 'Penjelajah', 'description': 'Created a profile'},
        {'id': uuid.uuid4(), 'name': 'Warlok', 'description': 'Verified local resident'},
    ])


def downgrade() -> None:
    """Drop the core tables."""
    op.drop_index('ix_users_badge_user_id', table_name='users_badge')
    op.drop_table('users_badge')
    op.drop_table('users_profile')
    op.drop_table('badges')
