"""Create groups, entries and entry_groups tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create catalog tables."""
    # Classification groups (ids unique across axes)
    op.create_table(
        'groups',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('axis', sa.String(20), nullable=False, index=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False, index=True),
        sa.Column('count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('attributes', sa.JSON(), nullable=False),
    )

    op.create_unique_constraint(
        'uq_groups_axis_slug',
        'groups',
        ['axis', 'slug'],
    )

    # Entries
    op.create_table(
        'entries',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('visibility', sa.String(20), nullable=False, server_default='published', index=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=True, index=True),
        sa.Column('rating_average', sa.Float(), nullable=False, server_default='0'),
        sa.Column('rating_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('stock_status', sa.String(20), nullable=False, server_default='instock', index=True),
        sa.Column('attributes', sa.JSON(), nullable=False),
        sa.Column('excerpt', sa.Text(), nullable=False, server_default=''),
        sa.Column('permalink', sa.String(1000), nullable=False, server_default=''),
        sa.Column('image_url', sa.String(1000), nullable=True),
        sa.Column('on_sale', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()'), index=True),
    )

    # Memberships; axis is denormalized for per-axis counts
    op.create_table(
        'entry_groups',
        sa.Column('entry_id', sa.Integer(),
                  sa.ForeignKey('entries.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('group_id', sa.Integer(),
                  sa.ForeignKey('groups.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('axis', sa.String(20), nullable=False, index=True),
    )

    op.create_index(
        'ix_entry_groups_group_entry',
        'entry_groups',
        ['group_id', 'entry_id'],
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_index('ix_entry_groups_group_entry', table_name='entry_groups')
    op.drop_table('entry_groups')
    op.drop_table('entries')
    op.drop_constraint('uq_groups_axis_slug', 'groups', type_='unique')
    op.drop_table('groups')
