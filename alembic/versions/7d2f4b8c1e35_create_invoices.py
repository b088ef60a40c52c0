"""create_invoices

Revision ID: 7d2f4b8c1e35
Revises: 4c1e2a9b7d10
Create Date: 2026-10-17 15:40:02.114870

"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '7d2f4b8c1e35'
down_revision: Union[str, None] = '4c1e2a9b7d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute(sa.schema.CreateSequence(sa.Sequence('invoice_number_seq')))

    op.create_table(
        'invoices',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('shopkeeper_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('invoice_number', sa.String(50), nullable=False),
        sa.Column('invoice_date', sa.Date(), nullable=False, server_default=sa.func.current_date()),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('customer_name', sa.String(200), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=True),
        sa.Column('customer_phone', sa.String(50), nullable=True),
        sa.Column('customer_address', sa.String(500), nullable=True),
        sa.Column('customer_gstin', sa.String(50), nullable=True),
        sa.Column('shop_name', sa.String(200), nullable=True),
        sa.Column('shop_address', sa.String(500), nullable=True),
        sa.Column('shop_place', sa.String(200), nullable=True),
        sa.Column('shop_phone', sa.String(50), nullable=True),
        sa.Column(
            'items',
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default='[]',
        ),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('tax_rate', sa.Numeric(5, 2), nullable=True),
        sa.Column('tax_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('discount', sa.Numeric(12, 2), nullable=True),
        sa.Column('discount_type', sa.String(20), nullable=True),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('terms', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft'),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['shopkeeper_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('shopkeeper_id', 'invoice_number', name='uq_invoices_shopkeeper_number'),
    )
    op.create_index(op.f('ix_invoices_shopkeeper_id'), 'invoices', ['shopkeeper_id'])
    op.create_index('ix_invoices_shopkeeper_created', 'invoices', ['shopkeeper_id', 'created_at'])
    op.create_index('ix_invoices_shopkeeper_status', 'invoices', ['shopkeeper_id', 'status'])


def downgrade() -> None:
    op.drop_index('ix_invoices_shopkeeper_status', table_name='invoices')
    op.drop_index('ix_invoices_shopkeeper_created', table_name='invoices')
    op.drop_index(op.f('ix_invoices_shopkeeper_id'), table_name='invoices')
    op.drop_table('invoices')
    op.execute(sa.schema.DropSequence(sa.Sequence('invoice_number_seq')))
