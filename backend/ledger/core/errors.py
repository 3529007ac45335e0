"""Error Hierarchy — typed, categorized exceptions for every ledger failure mode.

Invariants:
    - Every error has a code (ErrorCode), http_status, detail and (once surfaced) a title
    - Client errors (400/404) carry actionable detail; StorageError detail stays generic
    - FieldValidationError is never mixed with other kinds in one response
    - to_response() delegates to build_error_response (single wire shape)

Design Decisions:
    - Single hierarchy with LedgerError base: one FastAPI handler catches all
    - Title may be stamped late by titled(): repositories know the failing
      operation, orchestrators know which request it interrupted
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterator

from ledger.core.domain_types import ErrorCode
from ledger.core.error_response import (
    ErrorDescription, FieldError, build_error_response,
)


# Titles shared by orchestrators and routes
FAILED_TO_CREATE_ACCOUNT = "failed to create account"
FAILED_TO_CREATE_TRANSACTION = "failed to create transaction"
FAILED_TO_GET_ACCOUNT = "failed to get account"
ACCOUNT_NOT_FOUND = "account not found"


@dataclass
class ErrorContext:
    """Observability context, logged but never sent to the client."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        detail: str,
        code: ErrorCode,
        http_status: int,
        title: str | None = None,
        field_errors: list[FieldError] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(detail)
        self.detail = detail
        self.code = code
        self.http_status = http_status
        self.title = title
        self.field_errors = field_errors or []
        self.context = context or ErrorContext()

    @property
    def is_client_error(self) -> bool:
        return self.http_status < 500

    def to_response(self) -> dict:
        """Convert to the standardized {"errors": [...]} body."""
        return build_error_response(
            ErrorDescription(
                code=self.code,
                status=self.http_status,
                title=self.title or "",
                detail=self.detail,
            ),
            self.field_errors,
        )


# ─── Client Errors (400/404) ────────────────────────────────────

class FieldValidationError(LedgerError):
    """Request body failed field-level validation."""
    def __init__(
        self, field_errors: list[FieldError], title: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            "failed to validate request body", ErrorCode.VALIDATION_ERROR,
            400, title, field_errors, context,
        )


class DuplicateRequestError(LedgerError):
    """Idempotency key already processed."""
    def __init__(
        self, resource_id: str, title: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_id = resource_id
        super().__init__(
            "duplicate request received", ErrorCode.BAD_REQUEST,
            400, title, context=ctx,
        )
        self.resource_id = resource_id


class ReferenceNotFoundError(LedgerError):
    """A resource referenced by the request body does not exist."""
    def __init__(
        self, detail: str, title: str, context: ErrorContext | None = None,
    ):
        super().__init__(detail, ErrorCode.BAD_REQUEST, 400, title, context=context)


class ResourceNotFoundError(LedgerError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, title: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found", ErrorCode.NOT_FOUND,
            404, title, context=ctx,
        )


class RequestDecodingError(LedgerError):
    """Request body is not valid JSON or has the wrong field types."""
    def __init__(
        self, field_errors: list[FieldError] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            "request body could not be decoded", ErrorCode.BAD_REQUEST,
            400, "failed to decode request body", field_errors, context,
        )


# ─── Server Errors (500) ────────────────────────────────────────

class StorageError(LedgerError):
    """Repository round trip failed. Cause is chained, never sent to the client."""
    def __init__(
        self, operation: str, title: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            "internal storage failure", ErrorCode.INTERNAL_ERROR,
            500, title, context=ctx,
        )
        self.operation = operation


class DeadlineExceededError(LedgerError):
    """Request was aborted before the write completed."""
    def __init__(self, timeout_seconds: float, title: str | None = None):
        super().__init__(
            "request deadline exceeded", ErrorCode.INTERNAL_ERROR,
            500, title, context=ErrorContext(
                debug_info={"timeout_seconds": timeout_seconds},
            ),
        )


@contextmanager
def titled(title: str) -> Iterator[None]:
    """Stamp title onto any untitled LedgerError raised inside the block."""
    try:
        yield
    except LedgerError as exc:
        if not exc.title:
            exc.title = title
        raise
