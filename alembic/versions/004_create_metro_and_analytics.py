"""Create metro_stations and property_analytics tables

Revision ID: 004
Revises: 003
Create Date: 2025-04-02 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '004'
down_revision = '003'
branch_labels = None
depends_on = None


def upgrade() -> None:
    metro_line = postgresql.ENUM('chilanzar', 'uzbekistan', 'yunusabad', name='metroline')
    metro_line.create(op.get_bind())

    op.create_table(
        'metro_stations',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('name_ru', sa.String(100), nullable=False),
        sa.Column('name_uz', sa.String(100), nullable=False),
        sa.Column('line', postgresql.ENUM(name='metroline', create_type=False), nullable=False),
        sa.Column('line_name_ru', sa.String(100), nullable=False),
        sa.Column('line_name_uz', sa.String(100), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('opened_year', sa.Integer(), nullable=True),
        sa.Column('is_operational', sa.Boolean(), nullable=False, server_default='true'),
    )

    op.create_index('ix_metro_stations_id', 'metro_stations', ['id'])
    op.create_index('ix_metro_stations_line', 'metro_stations', ['line'])
    op.create_index('ix_metro_stations_is_operational', 'metro_stations', ['is_operational'])

    op.create_table(
        'property_analytics',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('favorites', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unfavorites', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('contacts', sa.Integer(), nullable=False, server_default='0'),

        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('property_id', 'date', name='uq_property_analytics_day'),
    )

    op.create_index('ix_property_analytics_id', 'property_analytics', ['id'])
    op.create_index('ix_property_analytics_property_id', 'property_analytics', ['property_id'])
    op.create_index('ix_property_analytics_date', 'property_analytics', ['date'])


def downgrade() -> None:
    op.drop_index('ix_property_analytics_date', table_name='property_analytics')
    op.drop_index('ix_property_analytics_property_id', table_name='property_analytics')
    op.drop_index('ix_property_analytics_id', table_name='property_analytics')
    op.drop_table('property_analytics')

    op.drop_index('ix_metro_stations_is_operational', table_name='metro_stations')
    op.drop_index('ix_metro_stations_line', table_name='metro_stations')
    op.drop_index('ix_metro_stations_id', table_name='metro_stations')
    op.drop_table('metro_stations')

    postgresql.ENUM(name='metroline').drop(op.get_bind())
