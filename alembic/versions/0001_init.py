from alembic import op
import sqlalchemy as sa

revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'customers',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('address1', sa.String(200), nullable=True),
        sa.Column('address2', sa.String(200), nullable=True),
        sa.Column('state', sa.String(50), nullable=True),
        sa.Column('zip_code', sa.String(20), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('created_at_utc', sa.DateTime, nullable=False),
        sa.Column('updated_at_utc', sa.DateTime, nullable=True)
    )
    op.create_index('ix_customers_last_name', 'customers', ['last_name'])

    op.create_table(
        'suppliers',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('company_name', sa.String(200), nullable=False),
        sa.Column('contact_name', sa.String(100), nullable=True),
        sa.Column('contact_title', sa.String(100), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('fax', sa.String(50), nullable=True),
        sa.Column('created_at_utc', sa.DateTime, nullable=False),
        sa.Column('updated_at_utc', sa.DateTime, nullable=True)
    )
    op.create_index('ix_suppliers_company_name', 'suppliers', ['company_name'])

    op.create_table(
        'products',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('product_name', sa.String(200), nullable=False),
        sa.Column('supplier_id', sa.Integer, sa.ForeignKey('suppliers.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('package', sa.String(100), nullable=True),
        sa.Column('is_discontinued', sa.Boolean, nullable=False, server_default=sa.text('false')),
        sa.Column('created_at_utc', sa.DateTime, nullable=False),
        sa.Column('updated_at_utc', sa.DateTime, nullable=True)
    )
    op.create_index('ix_products_product_name', 'products', ['product_name'])
    op.create_index('ix_products_supplier_id', 'products', ['supplier_id'])

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('order_number', sa.String(50), nullable=False),
        sa.Column('order_date', sa.DateTime, nullable=False),
        sa.Column('customer_id', sa.Integer, sa.ForeignKey('customers.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('created_at_utc', sa.DateTime, nullable=False),
        sa.Column('updated_at_utc', sa.DateTime, nullable=True)
    )
    op.create_index('ix_orders_order_number', 'orders', ['order_number'])
    op.create_index('ix_orders_order_date', 'orders', ['order_date'])
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])

    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('order_id', sa.Integer, sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Integer, sa.ForeignKey('products.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('quantity', sa.Integer, nullable=False)
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])
    op.create_index('ix_order_items_product_id', 'order_items', ['product_id'])

def downgrade():
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('products')
    op.drop_table('suppliers')
    op.drop_table('customers')
