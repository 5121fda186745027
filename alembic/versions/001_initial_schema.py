"""Initial schema: tenants, products, orders

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Tenants table
    op.create_table(
        'tenants',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('slug', sa.String(63), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('whatsapp_number', sa.String(20), nullable=False),
        sa.Column('admin_password_hash', sa.String(255), nullable=False),
        sa.Column('credentials_version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('plan', sa.Enum('TRIAL', 'BASIC', 'PRO', name='tenantplan'), nullable=False, server_default='TRIAL'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('is_open', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('categories', sa.JSON(), nullable=True),
        sa.Column('trial_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    # Slug uniqueness lives here, not in application code
    op.create_index('ix_tenant_slug_unique', 'tenants', ['slug'], unique=True)
    op.create_index('ix_tenant_created_at', 'tenants', ['created_at'])

    # Products table
    op.create_table(
        'products',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('tenant_id', sa.String(36), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('image', sa.Text(), nullable=True),
        sa.Column('category', sa.String(100), nullable=False, server_default=''),
        sa.Column('available', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('extras', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('price >= 0', name='price_non_negative'),
    )
    op.create_index('ix_products_tenant_id', 'products', ['tenant_id'])
    op.create_index('ix_product_tenant_available', 'products', ['tenant_id', 'available'])

    # Orders table
    op.create_table(
        'orders',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('tenant_id', sa.String(36), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('customer_contact', sa.String(50), nullable=True),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('total', sa.Numeric(10, 2), nullable=False),
        sa.Column('delivery_method', sa.Enum('DINE_IN', 'PICKUP', 'DELIVERY', name='deliverymethod'), nullable=False),
        sa.Column('table_number', sa.String(20), nullable=True),
        sa.Column('pickup_time', sa.String(100), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('status', sa.Enum('PENDING', 'PREPARING', 'READY', 'DELIVERED', 'CANCELLED', name='orderstatus'), nullable=False, server_default='PENDING'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_order_tenant_created', 'orders', ['tenant_id', 'created_at'])
    op.create_index('ix_order_tenant_status', 'orders', ['tenant_id', 'status'])


def downgrade() -> None:
    op.drop_table('orders')
    op.drop_table('products')
    op.drop_table('tenants')

    # Drop enum types
    op.execute('DROP TYPE IF EXISTS orderstatus')
    op.execute('DROP TYPE IF EXISTS deliverymethod')
    op.execute('DROP TYPE IF EXISTS tenantplan')
