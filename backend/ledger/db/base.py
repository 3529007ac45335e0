"""Declarative Base — metadata root for the accounts, operation_types and transactions tables.

Alembic env.py and the test fixtures (create_all) both read Base.metadata,
so every model module must be imported through ledger.models first.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
