"""Services Layer — orchestrates pure core functions around repository IO.

Invariants:
    - Services depend on repository Protocols, never on SQLAlchemy directly
    - Every failure leaves as a LedgerError carrying a title
"""
