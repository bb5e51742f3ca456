"""Create favorites and price_history tables

Revision ID: 003
Revises: 002
Create Date: 2025-03-12 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '003'
down_revision = '002'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'favorites',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'property_id', name='uq_user_property_favorite'),
    )

    op.create_index('ix_favorites_id', 'favorites', ['id'])
    op.create_index('ix_favorites_user_id', 'favorites', ['user_id'])
    op.create_index('ix_favorites_property_id', 'favorites', ['property_id'])
    op.create_index('ix_favorites_created_at', 'favorites', ['created_at'])

    op.create_table(
        'price_history',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=False),
        sa.Column('old_price', sa.Integer(), nullable=False),
        sa.Column('new_price', sa.Integer(), nullable=False),
        sa.Column('currency', postgresql.ENUM(name='currency', create_type=False), nullable=False,
                  server_default='YE'),
        sa.Column('changed_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['changed_by'], ['users.id'], ondelete='SET NULL'),
    )

    op.create_index('ix_price_history_id', 'price_history', ['id'])
    op.create_index('ix_price_history_property_id', 'price_history', ['property_id'])
    op.create_index('ix_price_history_created_at', 'price_history', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_price_history_created_at', table_name='price_history')
    op.drop_index('ix_price_history_property_id', table_name='price_history')
    op.drop_index('ix_price_history_id', table_name='price_history')
    op.drop_table('price_history')

    op.drop_index('ix_favorites_created_at', table_name='favorites')
    op.drop_index('ix_favorites_property_id', table_name='favorites')
    op.drop_index('ix_favorites_user_id', table_name='favorites')
    op.drop_index('ix_favorites_id', table_name='favorites')
    op.drop_table('favorites')
