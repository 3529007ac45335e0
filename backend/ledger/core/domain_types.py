"""Domain Types — identity types, error codes and the three ledger entities.

Invariants:
    - AccountId and TransactionId wrap UUIDs derived from idempotency keys
    - Entities are frozen: nothing in the ledger is mutated after creation
    - Transaction.amount is already sign-resolved (credit > 0, debit < 0)
    - Storage limits are declared once here; the ORM columns and the
      request validators both read them

Design Decisions:
    - NewType over wrapper classes: zero runtime cost, full type-checker support
    - str Enum for ErrorCode: serializes to JSON without a custom encoder
    - Frozen dataclasses cross the repository boundary instead of ORM rows,
      so in-memory repositories satisfy the same contract
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

AccountId = NewType("AccountId", UUID)
TransactionId = NewType("TransactionId", UUID)
OperationTypeId = NewType("OperationTypeId", int)


# ─── Storage Limits ──────────────────────────────────────────────

# operation_types.id is a 32-bit signed INTEGER
MAX_OPERATION_TYPE_ID = 2**31 - 1

# transactions.amount is NUMERIC(AMOUNT_PRECISION, AMOUNT_SCALE)
AMOUNT_PRECISION = 20
AMOUNT_SCALE = 8
AMOUNT_LIMIT = Decimal(10) ** (AMOUNT_PRECISION - AMOUNT_SCALE)


# ─── Enums ───────────────────────────────────────────────────────

class ErrorCode(str, Enum):
    """Stable machine-readable codes carried by every wire error."""
    VALIDATION_ERROR = "validation_error"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    INTERNAL_ERROR = "internal_error"


# ─── Entities ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Account:
    id: AccountId
    document_number: str
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    id: TransactionId
    account_id: AccountId
    operation_type_id: OperationTypeId
    amount: Decimal
    event_date: datetime


@dataclass(frozen=True)
class OperationType:
    """Reference data: credit operations add to a balance, debits subtract."""
    id: OperationTypeId
    is_credit: bool
    description: str = ""
