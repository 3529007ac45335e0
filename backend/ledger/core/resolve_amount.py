"""Amount Resolution — assigns the stored sign from the operation type.

Invariants:
    - Input amount is a non-negative magnitude (enforced by validation)
    - Credit keeps the magnitude, debit negates it
"""

from decimal import Decimal


def resolve_amount(amount: Decimal, is_credit: bool) -> Decimal:
    """Return the signed amount to persist: positive for credit, negative for debit."""
    if is_credit:
        return amount
    return -amount
