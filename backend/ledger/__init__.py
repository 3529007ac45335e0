"""Ledger — idempotent account creation and signed, append-only transactions.

Layout:
    core/            pure rules: validation, identifier derivation, amount sign, errors
    services/        creation protocols over repository Protocols
    infrastructure/  SQLAlchemy sessions and repositories, logging
    api/             FastAPI routes, dependency wiring, error rendering
"""
