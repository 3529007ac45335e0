"""In-memory repositories — satisfy the repository Protocols without a database.

Each fake records its calls so tests can assert which storage round trips
happened (e.g. that validation failures never reach storage). Set `fail_on`
to an operation name to make that call raise StorageError.
"""

from ledger.core.domain_types import (
    Account, AccountId, OperationType, OperationTypeId,
    Transaction, TransactionId,
)
from ledger.core.errors import StorageError


class _Recorder:
    def __init__(self):
        self.calls: list[str] = []
        self.fail_on: set[str] = set()

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise StorageError(operation)


class InMemoryAccountRepository(_Recorder):

    def __init__(self, accounts: list[Account] | None = None):
        super().__init__()
        self.rows: dict[AccountId, Account] = {a.id: a for a in accounts or []}

    async def create(self, account: Account) -> None:
        self._record("create")
        self.rows.setdefault(account.id, account)  # conflict-ignore

    async def get(self, account_id: AccountId) -> Account | None:
        self._record("get")
        return self.rows.get(account_id)

    async def exists_by_idempotency(self, account_id: AccountId) -> bool:
        self._record("exists_by_idempotency")
        return account_id in self.rows


class InMemoryTransactionRepository(_Recorder):

    def __init__(self):
        super().__init__()
        self.rows: dict[TransactionId, Transaction] = {}

    async def create(self, transaction: Transaction) -> None:
        self._record("create")
        self.rows.setdefault(transaction.id, transaction)

    async def exists_by_idempotency(self, transaction_id: TransactionId) -> bool:
        self._record("exists_by_idempotency")
        return transaction_id in self.rows


class InMemoryOperationTypeRepository(_Recorder):

    def __init__(self, operation_types: list[OperationType] | None = None):
        super().__init__()
        if operation_types is None:
            operation_types = [
                OperationType(OperationTypeId(1), False, "normal purchase"),
                OperationType(OperationTypeId(2), False, "purchase with installments"),
                OperationType(OperationTypeId(3), False, "withdrawal"),
                OperationType(OperationTypeId(4), True, "credit voucher"),
            ]
        self.rows = {ot.id: ot for ot in operation_types}

    async def get(
        self, operation_type_id: OperationTypeId,
    ) -> OperationType | None:
        self._record("get")
        return self.rows.get(operation_type_id)


class RacingAccountRepository(InMemoryAccountRepository):
    """Existence check always misses, as when a concurrent request with the
    same key has not committed yet. Only the conflict-ignore insert dedupes."""

    async def exists_by_idempotency(self, account_id: AccountId) -> bool:
        self._record("exists_by_idempotency")
        return False


class RacingTransactionRepository(InMemoryTransactionRepository):
    """Transaction counterpart of RacingAccountRepository."""

    async def exists_by_idempotency(self, transaction_id: TransactionId) -> bool:
        self._record("exists_by_idempotency")
        return False
