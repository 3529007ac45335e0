"""Account ORM — an immutable ledger account keyed by its derived UUID.

Invariants:
    - id is supplied by the caller (uuid5 of the idempotency key), no default
    - document_number is non-nullable
    - rows are never updated or deleted
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from ledger.db.base import Base


class Account(Base):
    """Account entity — referenced by transactions.account_id."""
    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True,
    )
    document_number: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
