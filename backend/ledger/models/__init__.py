"""ORM Models — SQLAlchemy declarative models for the ledger tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Primary keys of accounts and transactions are derived, never defaulted

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references and ForeignKeys before any query runs
"""

from ledger.models.account import Account  # noqa: F401
from ledger.models.operation_type import OperationType  # noqa: F401
from ledger.models.transaction import Transaction  # noqa: F401
