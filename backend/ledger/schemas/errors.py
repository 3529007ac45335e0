"""Error Schemas — OpenAPI description of the {"errors": [...]} body.

Not used to build responses (core/error_response.py does that); declared on
routes so /docs documents the error shape.
"""

from uuid import UUID

from pydantic import BaseModel

from ledger.core.domain_types import ErrorCode


class ErrorSource(BaseModel):
    field: str
    message: str


class ErrorEntry(BaseModel):
    id: UUID
    code: ErrorCode
    status: int
    title: str
    detail: str
    source: ErrorSource | None = None


class ErrorResponse(BaseModel):
    errors: list[ErrorEntry]


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation or bad request"},
    500: {"model": ErrorResponse, "description": "Internal error"},
}
