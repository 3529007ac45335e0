"""Transaction Schemas — POST /v1/transactions body and response."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class TransactionCreate(BaseModel):
    """Transaction creation body.

    amount is a magnitude; the stored sign comes from the operation type.
    account_uuid stays a str so a malformed value is reported as a field error.
    """
    account_uuid: str = Field(
        "", examples=["550e8400-e29b-41d4-a716-446655440000"],
    )
    operation_type_id: int = Field(0, examples=[1])
    amount: Decimal = Field(Decimal("0"), examples=["1.1"])
    idempotency_key: str = Field("", examples=["a0b6a1c2-trx-0001"])


class TransactionCreated(BaseModel):
    uuid: UUID
