"""Ledger schema — accounts, operation_types (seeded), transactions.

Revision ID: 001_ledger
Revises: None
Create Date: 2026-10-19

Primary keys of accounts and transactions are uuid5 values derived from
idempotency keys; inserts use ON CONFLICT (id) DO NOTHING against them.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_ledger"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


OPERATION_TYPES = [
    {"id": 1, "description": "normal purchase", "is_credit": False},
    {"id": 2, "description": "purchase with installments", "is_credit": False},
    {"id": 3, "description": "withdrawal", "is_credit": False},
    {"id": 4, "description": "credit voucher", "is_credit": True},
]


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("document_number", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    operation_types = op.create_table(
        "operation_types",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("description", sa.String(64), nullable=False),
        sa.Column("is_credit", sa.Boolean, nullable=False),
    )
    op.bulk_insert(operation_types, OPERATION_TYPES)

    op.create_table(
        "transactions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("account_id", UUID(as_uuid=True), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("operation_type_id", sa.Integer, sa.ForeignKey("operation_types.id"), nullable=False),
        sa.Column("amount", sa.Numeric(20, 8), nullable=False),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_transactions_account_id", "transactions", ["account_id"])


def downgrade() -> None:
    op.drop_index("ix_transactions_account_id", table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("operation_types")
    op.drop_table("accounts")
