"""SQL Repositories — conflict-ignore inserts, lookups and storage error mapping.

Tests cover:
    - Inserting the same id twice keeps one row and does not raise
    - get() returns None for a missing row
    - exists_by_idempotency reflects committed rows
    - Signed Decimal amounts round-trip through Numeric(20, 8)
    - Seeded operation types resolve with their credit flag
    - A broken statement surfaces as StorageError, not SQLAlchemyError
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from ledger.core.derive_identifier import derive_account_id, derive_transaction_id
from ledger.core.domain_types import Account, OperationTypeId, Transaction
from ledger.core.errors import StorageError
from ledger.infrastructure.account_repository import SqlAccountRepository
from ledger.infrastructure.operation_type_repository import (
    SqlOperationTypeRepository,
)
from ledger.infrastructure.transaction_repository import SqlTransactionRepository
from ledger.models.account import Account as AccountModel
from ledger.models.transaction import Transaction as TransactionModel


NOW = datetime(2026, 10, 1, 6, 22, 46, tzinfo=timezone.utc)
ACCOUNT_ID = derive_account_id("repo-account")
DEBIT_OPERATION_TYPE_ID = 1
CREDIT_OPERATION_TYPE_ID = 4


def _account(document_number="abc"):
    return Account(id=ACCOUNT_ID, document_number=document_number, created_at=NOW)


def _transaction(key, amount, operation_type_id=DEBIT_OPERATION_TYPE_ID):
    return Transaction(
        id=derive_transaction_id(key),
        account_id=ACCOUNT_ID,
        operation_type_id=OperationTypeId(operation_type_id),
        amount=Decimal(amount),
        event_date=NOW,
    )


# ─── Accounts ────────────────────────────────────────────────────

async def test_account_create_then_get(test_db):
    repo = SqlAccountRepository(test_db)
    await repo.create(_account())

    account = await repo.get(ACCOUNT_ID)

    assert account is not None
    assert account.id == ACCOUNT_ID
    assert account.document_number == "abc"


async def test_account_get_missing_returns_none(test_db):
    repo = SqlAccountRepository(test_db)
    assert await repo.get(derive_account_id("missing")) is None


async def test_account_double_insert_keeps_first_row(test_db):
    repo = SqlAccountRepository(test_db)
    await repo.create(_account("first"))
    await repo.create(_account("second"))

    count = await test_db.scalar(select(func.count()).select_from(AccountModel))
    assert count == 1
    assert (await repo.get(ACCOUNT_ID)).document_number == "first"


async def test_account_exists_by_idempotency(test_db):
    repo = SqlAccountRepository(test_db)
    assert await repo.exists_by_idempotency(ACCOUNT_ID) is False
    await repo.create(_account())
    assert await repo.exists_by_idempotency(ACCOUNT_ID) is True


# ─── Transactions ────────────────────────────────────────────────

async def test_transaction_signed_amounts_round_trip(test_db):
    await SqlAccountRepository(test_db).create(_account())
    repo = SqlTransactionRepository(test_db)

    await repo.create(_transaction("debit", "-1.1"))
    await repo.create(_transaction("credit", "60.5", CREDIT_OPERATION_TYPE_ID))

    rows = (await test_db.execute(
        select(TransactionModel.id, TransactionModel.amount),
    )).all()
    amounts = {row.id: row.amount for row in rows}
    assert amounts[derive_transaction_id("debit")] == Decimal("-1.1")
    assert amounts[derive_transaction_id("credit")] == Decimal("60.5")


async def test_transaction_double_insert_is_ignored(test_db):
    await SqlAccountRepository(test_db).create(_account())
    repo = SqlTransactionRepository(test_db)

    await repo.create(_transaction("same", "-10"))
    await repo.create(_transaction("same", "-20"))

    count = await test_db.scalar(
        select(func.count()).select_from(TransactionModel),
    )
    assert count == 1
    assert await repo.exists_by_idempotency(derive_transaction_id("same"))


async def test_transaction_exists_for_unknown_id(test_db):
    repo = SqlTransactionRepository(test_db)
    assert await repo.exists_by_idempotency(derive_transaction_id("nope")) is False


# ─── Operation types ─────────────────────────────────────────────

@pytest.mark.parametrize("operation_type_id, is_credit", [
    (1, False), (2, False), (3, False), (4, True),
])
async def test_seeded_operation_types(test_db, operation_type_id, is_credit):
    repo = SqlOperationTypeRepository(test_db)
    operation_type = await repo.get(OperationTypeId(operation_type_id))
    assert operation_type is not None
    assert operation_type.is_credit is is_credit


async def test_unknown_operation_type_returns_none(test_db):
    repo = SqlOperationTypeRepository(test_db)
    assert await repo.get(OperationTypeId(99)) is None


# ─── Storage failures ────────────────────────────────────────────

async def test_failed_insert_raises_storage_error(test_db, test_engine):
    async with test_engine.begin() as conn:
        await conn.run_sync(AccountModel.__table__.drop)

    repo = SqlAccountRepository(test_db)
    with pytest.raises(StorageError) as exc_info:
        await repo.create(_account())

    assert exc_info.value.operation == "insert account"
    assert exc_info.value.http_status == 500
