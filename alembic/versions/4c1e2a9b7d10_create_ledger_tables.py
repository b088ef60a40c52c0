"""create_ledger_tables

Revision ID: 4c1e2a9b7d10
Revises:
Create Date: 2026-10-17 09:12:44.318205

"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '4c1e2a9b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _money(name: str) -> sa.Column:
    return sa.Column(name, sa.Numeric(12, 2), nullable=False, server_default='0.00')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('name', sa.String(200), nullable=False, server_default=''),
        sa.Column('business_name', sa.String(200), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_is_active'), 'users', ['is_active'], unique=False)

    op.create_table(
        'customers',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('shopkeeper_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('whatsapp_number', sa.String(50), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('type', sa.String(20), nullable=False, server_default='due'),
        _money('total_sales'),
        _money('total_paid'),
        _money('outstanding_due'),
        _money('opening_balance'),
        sa.Column('last_payment_date', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['shopkeeper_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_customers_shopkeeper_id'), 'customers', ['shopkeeper_id'])
    op.create_index('ix_customers_shopkeeper_type', 'customers', ['shopkeeper_id', 'type'])
    op.create_index('ix_customers_shopkeeper_name', 'customers', ['shopkeeper_id', 'name'])
    op.create_index(
        'ix_customers_shopkeeper_outstanding', 'customers', ['shopkeeper_id', 'outstanding_due']
    )

    op.create_table(
        'wholesalers',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('shopkeeper_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('whatsapp_number', sa.String(50), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('place', sa.String(200), nullable=True),
        sa.Column('gst_number', sa.String(50), nullable=True),
        _money('initial_balance'),
        _money('total_purchased'),
        _money('total_paid'),
        _money('outstanding_due'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['shopkeeper_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('shopkeeper_id', 'phone', name='uq_wholesalers_shopkeeper_phone'),
        sa.UniqueConstraint(
            'shopkeeper_id', 'whatsapp_number', name='uq_wholesalers_shopkeeper_whatsapp'
        ),
    )
    op.create_index(op.f('ix_wholesalers_shopkeeper_id'), 'wholesalers', ['shopkeeper_id'])
    op.create_index(op.f('ix_wholesalers_is_active'), 'wholesalers', ['is_active'])
    op.create_index(op.f('ix_wholesalers_is_deleted'), 'wholesalers', ['is_deleted'])
    op.create_index('ix_wholesalers_shopkeeper_name', 'wholesalers', ['shopkeeper_id', 'name'])
    op.create_index(
        'ix_wholesalers_shopkeeper_outstanding', 'wholesalers', ['shopkeeper_id', 'outstanding_due']
    )

    op.execute(sa.schema.CreateSequence(sa.Sequence('bill_number_seq')))

    op.create_table(
        'bills',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('shopkeeper_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('bill_number', sa.String(30), nullable=False),
        sa.Column('bill_type', sa.String(20), nullable=False),
        sa.Column('entity_type', sa.String(20), nullable=False),
        sa.Column('entity_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('entity_name', sa.String(200), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        _money('paid_amount'),
        sa.Column('due_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_method', sa.String(20), nullable=False),
        sa.Column(
            'items',
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default='[]',
        ),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='ACTIVE'),
        sa.Column('is_edited', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['shopkeeper_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('number'),
    )
    op.create_index(op.f('ix_bills_shopkeeper_id'), 'bills', ['shopkeeper_id'])
    op.create_index(op.f('ix_bills_bill_number'), 'bills', ['bill_number'], unique=True)
    op.create_index(op.f('ix_bills_bill_type'), 'bills', ['bill_type'])
    op.create_index(op.f('ix_bills_entity_type'), 'bills', ['entity_type'])
    op.create_index(op.f('ix_bills_status'), 'bills', ['status'])
    op.create_index('ix_bills_shopkeeper_created', 'bills', ['shopkeeper_id', 'created_at'])
    op.create_index('ix_bills_shopkeeper_entity', 'bills', ['shopkeeper_id', 'entity_id'])

    op.create_table(
        'payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('shopkeeper_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('entity_type', sa.String(20), nullable=False),
        sa.Column('entity_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('entity_name', sa.String(200), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_method', sa.String(20), nullable=False),
        sa.Column('bill_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['shopkeeper_id'], ['users.id']),
        sa.ForeignKeyConstraint(['bill_id'], ['bills.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_payments_shopkeeper_id'), 'payments', ['shopkeeper_id'])
    op.create_index(op.f('ix_payments_entity_type'), 'payments', ['entity_type'])
    op.create_index(op.f('ix_payments_entity_id'), 'payments', ['entity_id'])
    op.create_index(op.f('ix_payments_bill_id'), 'payments', ['bill_id'])
    op.create_index(op.f('ix_payments_created_at'), 'payments', ['created_at'])

    op.create_table(
        'transactions',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('shopkeeper_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_method', sa.String(20), nullable=False),
        sa.Column('reference', sa.String(50), nullable=True),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['shopkeeper_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_transactions_shopkeeper_id'), 'transactions', ['shopkeeper_id'])
    op.create_index(op.f('ix_transactions_type'), 'transactions', ['type'])
    op.create_index(op.f('ix_transactions_reference'), 'transactions', ['reference'])
    op.create_index(op.f('ix_transactions_created_at'), 'transactions', ['created_at'])

    op.create_table(
        'bill_audit_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('bill_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('changed_by', sa.String(255), nullable=False),
        sa.Column('changed_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('action', sa.String(20), nullable=False),
        sa.Column('changed_fields', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('old_values', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('new_values', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['bill_id'], ['bills.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_bill_audit_logs_bill_id'), 'bill_audit_logs', ['bill_id'])


def downgrade() -> None:
    op.drop_index(op.f('ix_bill_audit_logs_bill_id'), table_name='bill_audit_logs')
    op.drop_table('bill_audit_logs')
    op.drop_table('transactions')
    op.drop_table('payments')
    op.drop_table('bills')
    op.execute(sa.schema.DropSequence(sa.Sequence('bill_number_seq')))
    op.drop_table('wholesalers')
    op.drop_table('customers')
    op.drop_index(op.f('ix_users_is_active'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
