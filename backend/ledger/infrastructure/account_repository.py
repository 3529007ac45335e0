"""SQL Account Repository — AccountRepository protocol over an AsyncSession.

Invariants:
    - create() is a single conflict-ignore INSERT followed by commit
    - get() returns None for a missing row, never raises for not-found
    - Every SQLAlchemyError is re-raised as StorageError with the operation name
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.core.domain_types import Account, AccountId
from ledger.core.errors import StorageError
from ledger.infrastructure.database import insert_ignoring_conflicts
from ledger.models.account import Account as AccountModel

logger = logging.getLogger(__name__)


class SqlAccountRepository:
    """Accounts table access for one request-scoped session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, account: Account) -> None:
        stmt = insert_ignoring_conflicts(self.db, AccountModel, {
            "id": account.id,
            "document_number": account.document_number,
            "created_at": account.created_at,
        })
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError("insert account") from e
        if result.rowcount == 0:
            logger.info(
                "Account insert skipped, id already present",
                extra={"resource_id": str(account.id)},
            )

    async def get(self, account_id: AccountId) -> Account | None:
        try:
            result = await self.db.execute(
                select(AccountModel).where(AccountModel.id == account_id),
            )
        except SQLAlchemyError as e:
            raise StorageError("select account") from e
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return Account(
            id=AccountId(row.id),
            document_number=row.document_number,
            created_at=row.created_at,
        )

    async def exists_by_idempotency(self, account_id: AccountId) -> bool:
        try:
            count = await self.db.scalar(
                select(func.count())
                .select_from(AccountModel)
                .where(AccountModel.id == account_id),
            )
        except SQLAlchemyError as e:
            raise StorageError("count accounts") from e
        return bool(count)
