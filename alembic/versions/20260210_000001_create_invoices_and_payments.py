"""Create invoices and payments tables

Revision ID: 20260210_000001
Revises: None
Create Date: 2026-02-10

Payment requests and the on-chain payments that settle them.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20260210_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the invoices and payments tables."""
    op.create_table(
        'invoices',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('creator_address', sa.String(64), nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=6), nullable=False),
        sa.Column('token_symbol', sa.String(16), nullable=False, server_default='USDT0'),
        sa.Column('memo', sa.String(500), nullable=True),
        sa.Column(
            'status',
            sa.Enum('open', 'paid', name='invoice_status'),
            nullable=False,
            server_default='open'
        ),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_invoices_creator_address', 'invoices', ['creator_address'])
    op.create_index('ix_invoices_status', 'invoices', ['status'])

    op.create_table(
        'payments',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('invoice_id', sa.String(36), nullable=False),
        sa.Column('payer_address', sa.String(64), nullable=False),
        sa.Column('payee_address', sa.String(64), nullable=False),
        sa.Column('chain_id', sa.Integer(), nullable=False, server_default='114'),
        sa.Column('tx_hash', sa.String(80), nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=6), nullable=False),
        sa.Column('token_symbol', sa.String(16), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['invoice_id'],
            ['invoices.id'],
            name='fk_payments_invoice_id',
            ondelete='RESTRICT'
        ),
        sa.UniqueConstraint('tx_hash', name='uq_payments_tx_hash'),
    )
    op.create_index('ix_payments_invoice_id', 'payments', ['invoice_id'])
    op.create_index('ix_payments_tx_hash', 'payments', ['tx_hash'])


def downgrade() -> None:
    """Drop the payments and invoices tables."""
    op.drop_index('ix_payments_tx_hash', table_name='payments')
    op.drop_index('ix_payments_invoice_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_invoices_status', table_name='invoices')
    op.drop_index('ix_invoices_creator_address', table_name='invoices')
    op.drop_table('invoices')

    # Drop the enum type
    op.execute("DROP TYPE IF EXISTS invoice_status")
