"""Boundary Protocols — storage capabilities the orchestrators depend on.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Not-found is a None return, never an exception
    - Any other storage failure raises StorageError (ledger.core.errors)
    - create() is a conflict-ignore insert: an existing id is a silent no-op

Design Decisions:
    - Protocol over ABC: structural subtyping, so SQL repositories and the
      in-memory fakes used by tests satisfy the contract without inheritance
    - Async in Protocol: every implementation does IO; the pure core functions
      that run between these calls stay synchronous
"""

from typing import Protocol

from ledger.core.domain_types import (
    Account, AccountId, OperationType, OperationTypeId,
    Transaction, TransactionId,
)


class IdempotentStore(Protocol):
    """Anything the idempotency guard can ask about an existing identifier."""
    async def exists_by_idempotency(self, resource_id) -> bool: ...


class AccountRepository(Protocol):
    """Contract for account persistence — implemented by shell."""
    async def create(self, account: Account) -> None: ...
    async def get(self, account_id: AccountId) -> Account | None: ...
    async def exists_by_idempotency(self, account_id: AccountId) -> bool: ...


class TransactionRepository(Protocol):
    """Contract for transaction persistence — implemented by shell."""
    async def create(self, transaction: Transaction) -> None: ...
    async def exists_by_idempotency(
        self, transaction_id: TransactionId,
    ) -> bool: ...


class OperationTypeRepository(Protocol):
    """Read-only contract for operation type reference data."""
    async def get(
        self, operation_type_id: OperationTypeId,
    ) -> OperationType | None: ...
