"""Request Validation — pure field checks for account and transaction creation.

Invariants:
    - Validators are PURE: no storage access, no exceptions, return a list
    - Every failing field is reported (complete set, never short-circuited)
    - Empty list means the request may proceed to identifier derivation
    - account_uuid is checked for syntax only; existence is the orchestrator's job

Design Decisions:
    - Validation kept out of the Pydantic schemas: schemas only decode types,
      so missing fields reach here as defaults and are reported per field
"""

from decimal import Decimal
from uuid import UUID

from ledger.core.domain_types import AMOUNT_LIMIT, AMOUNT_SCALE
from ledger.core.error_response import FieldError


FIELD_REQUIRED = "field is required"


def validate_account_request(
    idempotency_key: str, document_number: str,
) -> list[FieldError]:
    """Account rules: idempotency_key and document_number non-empty."""
    errors: list[FieldError] = []
    if not idempotency_key:
        errors.append(FieldError("idempotency_key", FIELD_REQUIRED))
    if not document_number:
        errors.append(FieldError("document_number", FIELD_REQUIRED))
    return errors


def validate_transaction_request(
    idempotency_key: str,
    account_uuid: str,
    operation_type_id: int,
    amount: Decimal,
) -> list[FieldError]:
    """Transaction rules: key present, uuid parses, positive type id, storable amount."""
    errors: list[FieldError] = []
    if not idempotency_key:
        errors.append(FieldError("idempotency_key", FIELD_REQUIRED))
    if not is_valid_uuid(account_uuid):
        errors.append(FieldError(
            "account_uuid", f"invalid uuid: '{account_uuid}'",
        ))
    if operation_type_id <= 0:
        errors.append(FieldError(
            "operation_type_id",
            f"field is required and must be positive: {operation_type_id}",
        ))
    amount_error = _check_amount(amount)
    if amount_error:
        errors.append(FieldError("amount", amount_error))
    return errors


def _check_amount(amount: Decimal) -> str | None:
    """First rule the amount breaks, or None. Mirrors NUMERIC(20, 8)."""
    if not amount.is_finite():
        return f"field should be a finite number: {amount}"
    if amount < 0:
        return f"field should be non-negative: {amount:.2f}"
    if amount >= AMOUNT_LIMIT:
        return f"field should be less than {AMOUNT_LIMIT:f}: {amount:f}"
    exponent = amount.normalize().as_tuple().exponent
    if exponent < -AMOUNT_SCALE:
        return f"field allows at most {AMOUNT_SCALE} decimal places: {amount:f}"
    return None


def is_valid_uuid(value: str) -> bool:
    try:
        UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return True
