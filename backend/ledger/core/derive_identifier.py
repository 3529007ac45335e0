"""Identifier Derivation — maps an idempotency key to the resource's public UUID.

Invariants:
    - derive_identifier is PURE: same key, same UUID, every process, every release
    - IDEMPOTENCY_NAMESPACE is the nil UUID; changing it re-keys every stored row
    - Keys are validated non-empty before they reach this module
"""

import uuid

from ledger.core.domain_types import AccountId, TransactionId


IDEMPOTENCY_NAMESPACE: uuid.UUID = uuid.UUID(int=0)


def derive_identifier(idempotency_key: str) -> uuid.UUID:
    """Name-based (v5, SHA-1) UUID over the fixed namespace."""
    return uuid.uuid5(IDEMPOTENCY_NAMESPACE, idempotency_key)


def derive_account_id(idempotency_key: str) -> AccountId:
    return AccountId(derive_identifier(idempotency_key))


def derive_transaction_id(idempotency_key: str) -> TransactionId:
    return TransactionId(derive_identifier(idempotency_key))
