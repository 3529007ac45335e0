"""Dependency Wiring — builds repositories and handlers per request.

Invariants:
    - One AsyncSession per request, shared by every repository of that request
    - Handlers receive their repositories at construction (no globals)

Design Decisions:
    - Tests override get_db only; everything below it is the production wiring
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.infrastructure.account_repository import SqlAccountRepository
from ledger.infrastructure.database import get_db
from ledger.infrastructure.operation_type_repository import (
    SqlOperationTypeRepository,
)
from ledger.infrastructure.transaction_repository import (
    SqlTransactionRepository,
)
from ledger.services.handle_accounts import AccountHandlers
from ledger.services.handle_transactions import TransactionHandlers


def get_account_handlers(
    db: AsyncSession = Depends(get_db),
) -> AccountHandlers:
    return AccountHandlers(SqlAccountRepository(db))


def get_transaction_handlers(
    db: AsyncSession = Depends(get_db),
) -> TransactionHandlers:
    return TransactionHandlers(
        transactions=SqlTransactionRepository(db),
        accounts=SqlAccountRepository(db),
        operation_types=SqlOperationTypeRepository(db),
    )
