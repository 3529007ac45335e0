"""Transaction ORM — an append-only signed movement against an account.

Invariants:
    - id is supplied by the caller (uuid5 of the idempotency key), no default
    - account_id and operation_type_id are enforced by foreign keys
    - amount is stored signed: negative for debit operation types

Design Decisions:
    - Numeric(20, 8) over Float: amounts round-trip as Decimal without drift
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from ledger.core.domain_types import AMOUNT_PRECISION, AMOUNT_SCALE
from ledger.db.base import Base


class Transaction(Base):
    """Transaction entity — belongs to one Account."""
    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True,
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("accounts.id"),
        nullable=False, index=True,
    )
    operation_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("operation_types.id"), nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(AMOUNT_PRECISION, AMOUNT_SCALE), nullable=False,
    )
    event_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
