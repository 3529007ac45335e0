"""Pydantic Schemas — request/response contracts for API endpoints.

Invariants:
    - Request schemas only decode types; business rules live in core/validate_request.py
    - Missing request fields decode to empty defaults so they are reported per field

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
