"""Account Schemas — POST /v1/accounts body and account responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    """Account creation body. Emptiness is checked by validate_account_request."""
    document_number: str = Field("", examples=["12345678900"])
    idempotency_key: str = Field(
        "", examples=["bc1f3956-e92e-4666-a5cd-4cbbd937b17f"],
    )


class AccountCreated(BaseModel):
    uuid: UUID


class AccountResponse(BaseModel):
    """Public account representation."""
    uuid: UUID
    document_number: str
    created_at: datetime
