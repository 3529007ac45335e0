"""Account Handlers — idempotent account creation and lookup.

Invariants:
    - create_account order: validate -> derive id -> guard -> build -> persist
    - Validation failures never reach the repository
    - Every error raised inside create_account carries "failed to create account"
    - get_account treats a malformed id exactly like an unknown one (404)

Design Decisions:
    - clock injected: tests pin created_at without patching datetime
"""

import logging
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID

from ledger.core.derive_identifier import derive_account_id
from ledger.core.domain_types import Account, AccountId
from ledger.core.errors import (
    ACCOUNT_NOT_FOUND, FAILED_TO_CREATE_ACCOUNT, FAILED_TO_GET_ACCOUNT,
    FieldValidationError, ResourceNotFoundError, titled,
)
from ledger.core.repository_protocols import AccountRepository
from ledger.core.validate_request import is_valid_uuid, validate_account_request
from ledger.services.idempotency_guard import check_idempotency

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccountHandlers:
    """Creation protocol and read path for accounts."""

    def __init__(
        self, accounts: AccountRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.accounts = accounts
        self.clock = clock

    async def create_account(
        self, idempotency_key: str, document_number: str,
    ) -> AccountId:
        """Create an account once per idempotency key. Returns the derived id."""
        with titled(FAILED_TO_CREATE_ACCOUNT):
            field_errors = validate_account_request(
                idempotency_key, document_number,
            )
            if field_errors:
                raise FieldValidationError(field_errors)

            account_id = derive_account_id(idempotency_key)
            await check_idempotency(self.accounts, account_id)

            account = Account(
                id=account_id,
                document_number=document_number,
                created_at=self.clock(),
            )
            await self.accounts.create(account)

        logger.info("Account created", extra={"resource_id": str(account_id)})
        return account_id

    async def get_account(self, account_id: str) -> Account:
        """Fetch an account by its public id."""
        if not is_valid_uuid(account_id):
            raise ResourceNotFoundError(
                "account", account_id, title=ACCOUNT_NOT_FOUND,
            )
        with titled(FAILED_TO_GET_ACCOUNT):
            account = await self.accounts.get(AccountId(UUID(account_id)))
        if account is None:
            raise ResourceNotFoundError(
                "account", account_id, title=ACCOUNT_NOT_FOUND,
            )
        return account
