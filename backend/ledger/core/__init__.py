"""Core Layer — ledger rules with no IO.

Invariants:
    - Nothing here imports services/, api/, infrastructure/ or db/
    - Same input, same output; the random error entry ids are the one exception
"""
