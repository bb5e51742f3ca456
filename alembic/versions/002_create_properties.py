"""Create properties table

Revision ID: 002
Revises: 001
Create Date: 2025-03-05 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None

ENUMS = {
    'propertytype': ('apartment', 'house', 'condo', 'townhouse', 'land', 'commercial'),
    'listingtype': ('sale', 'rent', 'daily_rent'),
    'propertystatus': ('active', 'pending', 'sold', 'rented', 'inactive'),
    'currency': ('YE', 'UZS'),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(name=name, create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind)

    op.create_table(
        'properties',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),

        # Basic info
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('property_type', _enum('propertytype'), nullable=False),
        sa.Column('listing_type', _enum('listingtype'), nullable=False),
        sa.Column('status', _enum('propertystatus'), nullable=False, server_default='active'),

        # Pricing
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('currency', _enum('currency'), nullable=False, server_default='YE'),

        # Details
        sa.Column('area', sa.Float(), nullable=False),
        sa.Column('rooms', sa.Integer(), nullable=True),
        sa.Column('floor', sa.Integer(), nullable=True),
        sa.Column('total_floors', sa.Integer(), nullable=True),

        # Location
        sa.Column('address', sa.String(255), nullable=False),
        sa.Column('city', sa.String(100), nullable=False, server_default='Tashkent'),
        sa.Column('district', sa.String(100), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('nearest_metro', sa.String(100), nullable=True),
        sa.Column('metro_distance', sa.Integer(), nullable=True),

        # Counters
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('favorite_count', sa.Integer(), nullable=False, server_default='0'),

        # Timestamps
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),

        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
    )

    op.create_index('ix_properties_id', 'properties', ['id'])
    op.create_index('ix_properties_user_id', 'properties', ['user_id'])
    op.create_index('ix_properties_property_type', 'properties', ['property_type'])
    op.create_index('ix_properties_listing_type', 'properties', ['listing_type'])
    op.create_index('ix_properties_status', 'properties', ['status'])
    op.create_index('ix_properties_price', 'properties', ['price'])
    op.create_index('ix_properties_rooms', 'properties', ['rooms'])
    op.create_index('ix_properties_city', 'properties', ['city'])
    op.create_index('ix_properties_district', 'properties', ['district'])
    op.create_index('ix_properties_nearest_metro', 'properties', ['nearest_metro'])


def downgrade() -> None:
    for column in ('nearest_metro', 'district', 'city', 'rooms', 'price', 'status',
                   'listing_type', 'property_type', 'user_id', 'id'):
        op.drop_index(f'ix_properties_{column}', table_name='properties')
    op.drop_table('properties')

    bind = op.get_bind()
    for name in ENUMS:
        postgresql.ENUM(name=name).drop(bind)
