"""OperationType ORM — read-only reference data seeded by migration 001."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger.db.base import Base


class OperationType(Base):
    """Credit/debit classification referenced by transactions."""
    __tablename__ = "operation_types"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False,
    )
    description: Mapped[str] = mapped_column(String(64), nullable=False)
    is_credit: Mapped[bool] = mapped_column(Boolean, nullable=False)
