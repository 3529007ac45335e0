"""Transaction Handlers — idempotent, sign-resolved transaction creation.

Invariants:
    - Order: validate -> derive id -> guard -> account lookup -> operation type
      lookup -> resolve amount -> build -> persist
    - Missing account or operation type is a 400 bad_request, never a 404;
      an operation_type_id beyond the INTEGER column counts as missing
    - Stored amount = amount for credit types, -amount for debit types
    - Storage failures on any step surface as 500 "failed to create transaction"
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable
from uuid import UUID

from ledger.core.derive_identifier import derive_transaction_id
from ledger.core.domain_types import (
    MAX_OPERATION_TYPE_ID, AccountId, OperationType, OperationTypeId,
    Transaction, TransactionId,
)
from ledger.core.errors import (
    FAILED_TO_CREATE_TRANSACTION, FieldValidationError,
    ReferenceNotFoundError, titled,
)
from ledger.core.repository_protocols import (
    AccountRepository, OperationTypeRepository, TransactionRepository,
)
from ledger.core.resolve_amount import resolve_amount
from ledger.core.validate_request import validate_transaction_request
from ledger.services.handle_accounts import utcnow
from ledger.services.idempotency_guard import check_idempotency

logger = logging.getLogger(__name__)


class TransactionHandlers:
    """Creation protocol for transactions, with cross-resource reference checks."""

    def __init__(
        self,
        transactions: TransactionRepository,
        accounts: AccountRepository,
        operation_types: OperationTypeRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.transactions = transactions
        self.accounts = accounts
        self.operation_types = operation_types
        self.clock = clock

    async def create_transaction(
        self,
        idempotency_key: str,
        account_uuid: str,
        operation_type_id: int,
        amount: Decimal,
    ) -> TransactionId:
        """Create a transaction once per idempotency key. Returns the derived id."""
        with titled(FAILED_TO_CREATE_TRANSACTION):
            field_errors = validate_transaction_request(
                idempotency_key, account_uuid, operation_type_id, amount,
            )
            if field_errors:
                raise FieldValidationError(field_errors)

            transaction_id = derive_transaction_id(idempotency_key)
            await check_idempotency(self.transactions, transaction_id)

            account_id = await self._require_account(account_uuid)
            operation_type = await self._require_operation_type(
                OperationTypeId(operation_type_id),
            )

            transaction = Transaction(
                id=transaction_id,
                account_id=account_id,
                operation_type_id=operation_type.id,
                amount=resolve_amount(amount, operation_type.is_credit),
                event_date=self.clock(),
            )
            await self.transactions.create(transaction)

        logger.info(
            "Transaction created",
            extra={"resource_id": str(transaction_id)},
        )
        return transaction_id

    async def _require_account(self, account_uuid: str) -> AccountId:
        # account_uuid already passed syntax validation
        account = await self.accounts.get(AccountId(UUID(account_uuid)))
        if account is None:
            raise ReferenceNotFoundError(
                f"account not found for account_uuid: '{account_uuid}'",
                title="failed to validate account",
            )
        return account.id

    async def _require_operation_type(
        self, operation_type_id: OperationTypeId,
    ) -> OperationType:
        # ids past the INTEGER column cannot exist; never sent to storage
        operation_type = None
        if operation_type_id <= MAX_OPERATION_TYPE_ID:
            operation_type = await self.operation_types.get(operation_type_id)
        if operation_type is None:
            raise ReferenceNotFoundError(
                f"invalid operation type: {operation_type_id}",
                title="failed to validate operation_type_id",
            )
        return operation_type
