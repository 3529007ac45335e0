"""Idempotency Guard — rejects creation requests whose derived id already exists.

Invariants:
    - Zero existing rows -> returns None; one or more -> DuplicateRequestError (400)
    - Storage failures propagate unchanged as StorageError (500)
    - NOT atomic with the insert: two concurrent requests with one key can both
      pass. The repository's ON CONFLICT DO NOTHING insert is the backstop, so
      the loser no-ops and both callers get the same deterministic id
"""

import logging
from uuid import UUID

from ledger.core.errors import DuplicateRequestError
from ledger.core.repository_protocols import IdempotentStore

logger = logging.getLogger(__name__)


async def check_idempotency(store: IdempotentStore, resource_id: UUID) -> None:
    """Raise DuplicateRequestError if resource_id is already persisted."""
    if await store.exists_by_idempotency(resource_id):
        logger.info(
            "Duplicate creation request",
            extra={"resource_id": str(resource_id)},
        )
        raise DuplicateRequestError(str(resource_id))
