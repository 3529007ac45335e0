"""Database Package — declarative Base shared by ledger.models and Alembic."""
