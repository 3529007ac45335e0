"""Transaction Handlers — creation protocol, reference checks and sign resolution.

Tests cover:
    - Debit types store -amount, credit types store +amount
    - Unknown account / operation type raise ReferenceNotFoundError (400)
    - operation_type_id past the INTEGER column is an unknown type, never queried
    - Replayed key raises DuplicateRequestError before any reference lookup
    - Validation failures never touch storage
    - Storage failures at every step surface as "failed to create transaction"
    - Concurrent same-key requests that both pass the guard return one id
      and leave one row
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ledger.core.derive_identifier import derive_account_id, derive_identifier
from ledger.core.domain_types import Account
from ledger.core.errors import (
    DuplicateRequestError, FieldValidationError,
    ReferenceNotFoundError, StorageError,
)
from ledger.services.handle_transactions import TransactionHandlers

from tests.services.fake_repositories import (
    InMemoryAccountRepository,
    InMemoryOperationTypeRepository,
    InMemoryTransactionRepository,
    RacingTransactionRepository,
)


NOW = datetime(2026, 10, 1, 6, 22, 46, tzinfo=timezone.utc)
ACCOUNT_ID = derive_account_id("account-key")
TRX_KEY = "trx-key-1"


@pytest.fixture
def accounts():
    return InMemoryAccountRepository([
        Account(id=ACCOUNT_ID, document_number="abc", created_at=NOW),
    ])


@pytest.fixture
def transactions():
    return InMemoryTransactionRepository()


@pytest.fixture
def operation_types():
    return InMemoryOperationTypeRepository()


@pytest.fixture
def handlers(transactions, accounts, operation_types):
    return TransactionHandlers(
        transactions, accounts, operation_types, clock=lambda: NOW,
    )


async def _create(handlers, key=TRX_KEY, account=str(ACCOUNT_ID), op=1, amount="1.1"):
    return await handlers.create_transaction(
        idempotency_key=key,
        account_uuid=account,
        operation_type_id=op,
        amount=Decimal(amount),
    )


async def test_debit_transaction_stores_negative_amount(handlers, transactions):
    trx_id = await _create(handlers, op=1, amount="1.1")

    stored = transactions.rows[trx_id]
    assert trx_id == derive_identifier(TRX_KEY)
    assert stored.amount == Decimal("-1.1")
    assert stored.account_id == ACCOUNT_ID
    assert stored.operation_type_id == 1
    assert stored.event_date == NOW


async def test_credit_transaction_stores_positive_amount(handlers, transactions):
    trx_id = await _create(handlers, op=4, amount="60.5")
    assert transactions.rows[trx_id].amount == Decimal("60.5")


async def test_unknown_account_is_a_bad_request(handlers, transactions):
    missing = str(derive_account_id("nobody"))

    with pytest.raises(ReferenceNotFoundError) as exc_info:
        await _create(handlers, account=missing)

    error = exc_info.value
    assert error.http_status == 400
    assert error.code.value == "bad_request"
    assert error.title == "failed to validate account"
    assert missing in error.detail
    assert transactions.rows == {}


async def test_unknown_operation_type_is_a_bad_request(handlers, transactions):
    with pytest.raises(ReferenceNotFoundError) as exc_info:
        await _create(handlers, op=99)

    assert exc_info.value.title == "failed to validate operation_type_id"
    assert exc_info.value.detail == "invalid operation type: 99"
    assert transactions.rows == {}


async def test_replayed_key_is_rejected_before_lookups(
    handlers, transactions, accounts, operation_types,
):
    await _create(handlers)
    accounts.calls.clear()
    operation_types.calls.clear()

    with pytest.raises(DuplicateRequestError) as exc_info:
        await _create(handlers, amount="999")

    assert exc_info.value.title == "failed to create transaction"
    assert accounts.calls == []
    assert operation_types.calls == []
    assert transactions.calls.count("create") == 1


async def test_validation_failure_never_touches_storage(
    handlers, transactions, accounts, operation_types,
):
    with pytest.raises(FieldValidationError) as exc_info:
        await _create(handlers, key="", account="bad", op=0, amount="-1")

    assert len(exc_info.value.field_errors) == 4
    assert transactions.calls == accounts.calls == operation_types.calls == []


@pytest.mark.parametrize("repo_name, operation", [
    ("transactions", "exists_by_idempotency"),
    ("accounts", "get"),
    ("operation_types", "get"),
    ("transactions", "create"),
])
async def test_storage_failures_are_server_errors(
    handlers, transactions, accounts, operation_types, repo_name, operation,
):
    repos = {
        "transactions": transactions,
        "accounts": accounts,
        "operation_types": operation_types,
    }
    repos[repo_name].fail_on.add(operation)

    with pytest.raises(StorageError) as exc_info:
        await _create(handlers)

    assert exc_info.value.http_status == 500
    assert exc_info.value.title == "failed to create transaction"


@pytest.mark.parametrize("op", [2**31, 2**63])
async def test_operation_type_past_integer_column_is_a_bad_request(
    handlers, transactions, operation_types, op,
):
    with pytest.raises(ReferenceNotFoundError) as exc_info:
        await _create(handlers, op=op)

    assert exc_info.value.http_status == 400
    assert exc_info.value.detail == f"invalid operation type: {op}"
    assert operation_types.calls == []
    assert transactions.rows == {}


async def test_largest_integer_operation_type_is_looked_up(
    handlers, operation_types,
):
    with pytest.raises(ReferenceNotFoundError):
        await _create(handlers, op=2**31 - 1)
    assert operation_types.calls == ["get"]


async def test_concurrent_same_key_yields_one_transaction(
    accounts, operation_types,
):
    transactions = RacingTransactionRepository()
    handlers = TransactionHandlers(
        transactions, accounts, operation_types, clock=lambda: NOW,
    )

    first = await _create(handlers, amount="1.1")
    second = await _create(handlers, amount="999")

    assert first == second == derive_identifier(TRX_KEY)
    assert transactions.calls.count("create") == 2
    assert len(transactions.rows) == 1
    assert transactions.rows[first].amount == Decimal("-1.1")
