"""SQL Transaction Repository — TransactionRepository protocol over an AsyncSession.

Invariants:
    - create() is a single conflict-ignore INSERT followed by commit
    - amount is written exactly as given (already sign-resolved)
    - Every SQLAlchemyError is re-raised as StorageError with the operation name
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.core.domain_types import Transaction, TransactionId
from ledger.core.errors import StorageError
from ledger.infrastructure.database import insert_ignoring_conflicts
from ledger.models.transaction import Transaction as TransactionModel

logger = logging.getLogger(__name__)


class SqlTransactionRepository:
    """Transactions table access for one request-scoped session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, transaction: Transaction) -> None:
        stmt = insert_ignoring_conflicts(self.db, TransactionModel, {
            "id": transaction.id,
            "account_id": transaction.account_id,
            "operation_type_id": transaction.operation_type_id,
            "amount": transaction.amount,
            "event_date": transaction.event_date,
        })
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError("insert transaction") from e
        if result.rowcount == 0:
            logger.info(
                "Transaction insert skipped, id already present",
                extra={"resource_id": str(transaction.id)},
            )

    async def exists_by_idempotency(self, transaction_id: TransactionId) -> bool:
        try:
            count = await self.db.scalar(
                select(func.count())
                .select_from(TransactionModel)
                .where(TransactionModel.id == transaction_id),
            )
        except SQLAlchemyError as e:
            raise StorageError("count transactions") from e
        return bool(count)
