"""Account Routes — POST /v1/accounts and GET /v1/accounts/{account_id}.

Invariants:
    - Creation answers 201 {"uuid"}; the uuid is derived from idempotency_key
    - Every failure is a LedgerError turned into {"errors": [...]} by error_handlers
"""

from fastapi import APIRouter, Depends, status

from ledger.api.dependencies import get_account_handlers
from ledger.config import Settings, get_settings
from ledger.core.errors import FAILED_TO_CREATE_ACCOUNT, FAILED_TO_GET_ACCOUNT
from ledger.schemas.account import AccountCreate, AccountCreated, AccountResponse
from ledger.schemas.errors import ERROR_RESPONSES, ErrorResponse
from ledger.services.deadline import run_with_deadline
from ledger.services.handle_accounts import AccountHandlers

router = APIRouter(prefix="/v1/accounts", tags=["accounts"])


@router.post(
    "", response_model=AccountCreated,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_account(
    body: AccountCreate,
    handlers: AccountHandlers = Depends(get_account_handlers),
    settings: Settings = Depends(get_settings),
):
    """Create an account. Replaying an idempotency key is rejected with 400."""
    account_id = await run_with_deadline(
        handlers.create_account(body.idempotency_key, body.document_number),
        settings.request_timeout_seconds,
        FAILED_TO_CREATE_ACCOUNT,
    )
    return AccountCreated(uuid=account_id)


@router.get(
    "/{account_id}", response_model=AccountResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Account not found"},
        500: ERROR_RESPONSES[500],
    },
)
async def get_account(
    account_id: str,
    handlers: AccountHandlers = Depends(get_account_handlers),
    settings: Settings = Depends(get_settings),
):
    """Get an account by its uuid."""
    account = await run_with_deadline(
        handlers.get_account(account_id),
        settings.request_timeout_seconds,
        FAILED_TO_GET_ACCOUNT,
    )
    return AccountResponse(
        uuid=account.id,
        document_number=account.document_number,
        created_at=account.created_at,
    )
