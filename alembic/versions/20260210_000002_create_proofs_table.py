"""Create proofs table

Revision ID: 20260210_000002
Revises: 20260210_000001
Create Date: 2026-02-10

Shareable payment proofs with their ProofRails receipt and Flare anchor.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20260210_000002"
down_revision: Union[str, None] = "20260210_000001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "proofs",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("payment_id", sa.String(36), nullable=False),
        sa.Column("public_slug", sa.String(64), nullable=False),
        sa.Column("anchored_on_flare", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("flare_anchor_ref", sa.String(80), nullable=True),
        sa.Column("proofrails_record_type", sa.String(32), nullable=True),
        sa.Column("proofrails_receipt_id", sa.String(128), nullable=True),
        sa.Column("proofrails_status", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["payment_id"],
            ["payments.id"],
            name="fk_proofs_payment_id",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("payment_id", name="uq_proofs_payment_id"),
        sa.UniqueConstraint("public_slug", name="uq_proofs_public_slug"),
    )
    op.create_index("ix_proofs_payment_id", "proofs", ["payment_id"])
    op.create_index("ix_proofs_public_slug", "proofs", ["public_slug"])
    op.create_index("ix_proofs_proofrails_receipt_id", "proofs", ["proofrails_receipt_id"])


def downgrade() -> None:
    op.drop_index("ix_proofs_proofrails_receipt_id", table_name="proofs")
    op.drop_index("ix_proofs_public_slug", table_name="proofs")
    op.drop_index("ix_proofs_payment_id", table_name="proofs")
    op.drop_table("proofs")
