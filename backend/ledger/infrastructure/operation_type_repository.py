"""SQL OperationType Repository — read-only lookups of credit/debit classification."""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.core.domain_types import OperationType, OperationTypeId
from ledger.core.errors import StorageError
from ledger.models.operation_type import OperationType as OperationTypeModel


class SqlOperationTypeRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(
        self, operation_type_id: OperationTypeId,
    ) -> OperationType | None:
        try:
            result = await self.db.execute(
                select(OperationTypeModel)
                .where(OperationTypeModel.id == operation_type_id),
            )
        except SQLAlchemyError as e:
            raise StorageError("select operation type") from e
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return OperationType(
            id=OperationTypeId(row.id),
            is_credit=row.is_credit,
            description=row.description,
        )
