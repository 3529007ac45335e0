"""Transaction Routes — POST /v1/transactions."""

from fastapi import APIRouter, Depends, status

from ledger.api.dependencies import get_transaction_handlers
from ledger.config import Settings, get_settings
from ledger.core.errors import FAILED_TO_CREATE_TRANSACTION
from ledger.schemas.errors import ERROR_RESPONSES
from ledger.schemas.transaction import TransactionCreate, TransactionCreated
from ledger.services.deadline import run_with_deadline
from ledger.services.handle_transactions import TransactionHandlers

router = APIRouter(prefix="/v1/transactions", tags=["transactions"])


@router.post(
    "", response_model=TransactionCreated,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_transaction(
    body: TransactionCreate,
    handlers: TransactionHandlers = Depends(get_transaction_handlers),
    settings: Settings = Depends(get_settings),
):
    """Create a transaction; amount sign follows the operation type."""
    transaction_id = await run_with_deadline(
        handlers.create_transaction(
            idempotency_key=body.idempotency_key,
            account_uuid=body.account_uuid,
            operation_type_id=body.operation_type_id,
            amount=body.amount,
        ),
        settings.request_timeout_seconds,
        FAILED_TO_CREATE_TRANSACTION,
    )
    return TransactionCreated(uuid=transaction_id)
