"""initial_storefront

Revision ID: 20261019_initial_storefront
Revises:
Create Date: 2026-10-19

Creates the multi-tenant storefront schema: auth users, tenants, profiles
and the tenant-scoped menu items, opening hours, restaurant info and promo
banners.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from fastapi_users_db_sqlalchemy.generics import GUID


# revision identifiers, used by Alembic.
revision: str = '20261019_initial_storefront'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MENU_CATEGORIES = ('snacks', 'drinks', 'specials', 'desserts')
PROMO_ACTION_TYPES = ('whatsapp', 'email', 'link', 'scroll', 'phone', 'download')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', GUID(), primary_key=True),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('hashed_password', sa.String(length=1024), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('restaurant_name', sa.String(), nullable=False),
        sa.Column('owner_id', GUID(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_tenants_slug', 'tenants', ['slug'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('id', GUID(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'menu_items',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column(
            'category',
            sa.Enum(*MENU_CATEGORIES, name='menu_category', native_enum=False, create_constraint=True),
            nullable=False,
        ),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('price >= 0', name='ck_menu_items_price_non_negative'),
    )
    op.create_index('ix_menu_items_tenant_id', 'menu_items', ['tenant_id'])

    op.create_table(
        'opening_hours',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),  # 0 = Monday
        sa.Column('open_time', sa.Time(), nullable=False),
        sa.Column('close_time', sa.Time(), nullable=False),
        sa.Column('slot_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('tenant_id', 'day_of_week', 'slot_index', name='uq_opening_hours_tenant_day_slot'),
        sa.CheckConstraint('day_of_week >= 0 AND day_of_week <= 6', name='ck_opening_hours_day_of_week'),
    )
    op.create_index('ix_opening_hours_tenant_id', 'opening_hours', ['tenant_id'])

    op.create_table(
        'restaurant_info',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('restaurant_name', sa.String(), nullable=True),
        sa.Column('hero_section', sa.JSON(), nullable=True),
        sa.Column('about_section', sa.JSON(), nullable=True),
        sa.Column('menu_section', sa.JSON(), nullable=True),
        sa.Column('google_maps_embed', sa.Text(), nullable=True),
        sa.Column('whatsapp', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('additional', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'promo_banners',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('background_color', sa.String(), nullable=True),
        sa.Column('text_color', sa.String(), nullable=True),
        sa.Column('button_text', sa.String(), nullable=True),
        sa.Column('icon', sa.String(), nullable=True),
        sa.Column(
            'action_type',
            sa.Enum(*PROMO_ACTION_TYPES, name='promo_action_type', native_enum=False, create_constraint=True),
            nullable=True,
        ),
        sa.Column('action_value', sa.String(), nullable=True),
        sa.Column('action_metadata', sa.JSON(), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_promo_banners_tenant_id', 'promo_banners', ['tenant_id'])


def downgrade():
    op.drop_index('ix_promo_banners_tenant_id', table_name='promo_banners')
    op.drop_table('promo_banners')
    op.drop_table('restaurant_info')
    op.drop_index('ix_opening_hours_tenant_id', table_name='opening_hours')
    op.drop_table('opening_hours')
    op.drop_index('ix_menu_items_tenant_id', table_name='menu_items')
    op.drop_table('menu_items')
    op.drop_table('profiles')
    op.drop_index('ix_tenants_slug', table_name='tenants')
    op.drop_table('tenants')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
