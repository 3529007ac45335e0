"""Error Handlers — global exception handlers for the ledger API.

Invariants:
    - LedgerError → {"errors": [...]} with its own status, code and title
    - RequestValidationError (undecodable body) → 400 bad_request, one entry per bad field
    - Starlette HTTPException (unknown route, wrong method) → same envelope
    - Exception (catch-all) → 500 internal_error, never leaks internal details
    - Each failure is logged exactly once: WARNING for client errors, ERROR for server errors

Design Decisions:
    - Four-layer handler: domain, decoding, routing, catch-all
    - A LedgerError without a title is a programming error: logged and
      answered with the catch-all body instead of a malformed one
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ledger.core.domain_types import ErrorCode
from ledger.core.error_response import (
    ErrorDescription, FieldError, build_error_response,
)
from ledger.core.errors import LedgerError, RequestDecodingError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_ledger_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_ledger_error_handler(app: FastAPI) -> None:

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        """Handle all ledger domain/infrastructure errors."""
        return _render_ledger_error(request, exc)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Body is not JSON or a field has the wrong type."""
        return _render_ledger_error(
            request, RequestDecodingError(_field_errors_from(exc)),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        """Routing-level errors raised by Starlette before any handler runs."""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            code = ErrorCode.NOT_FOUND
        elif exc.status_code < 500:
            code = ErrorCode.BAD_REQUEST
        else:
            code = ErrorCode.INTERNAL_ERROR
        logger.warning(
            f"HTTP {exc.status_code} on {request.url.path}",
            extra={"status": exc.status_code, "path": request.url.path},
        )
        title = str(exc.detail).lower() if exc.detail else "request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content=build_error_response(ErrorDescription(
                code=code, status=exc.status_code, title=title,
                detail=f"{request.method} {request.url.path}",
            )),
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return _internal_error_response()


def _render_ledger_error(request: Request, exc: LedgerError) -> JSONResponse:
    try:
        body = exc.to_response()
    except ValueError:
        logger.error(
            f"{type(exc).__name__} raised without a title on {request.url.path}",
            exc_info=exc,
            extra={"error_code": exc.code.value, "path": request.url.path},
        )
        return _internal_error_response()

    extra = {
        "error_code": exc.code.value,
        "error_id": body["errors"][0]["id"],
        "status": exc.http_status,
        "path": request.url.path,
        "resource_id": exc.context.resource_id,
        "operation": exc.context.operation,
    }
    if exc.is_client_error:
        logger.warning(f"{exc.title}: {exc.detail}", extra=extra)
    else:
        logger.error(f"{exc.title}: {exc.detail}", exc_info=exc, extra=extra)
    return JSONResponse(status_code=exc.http_status, content=body)


def _internal_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_response(ErrorDescription(
            code=ErrorCode.INTERNAL_ERROR,
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            title="failed to process request",
            detail="an unexpected error occurred",
        )),
    )


def _field_errors_from(exc: RequestValidationError) -> list[FieldError]:
    return [
        FieldError(field=_field_name(e), message=e["msg"])
        for e in exc.errors()
    ]


def _field_name(error: dict) -> str:
    # json_invalid carries the byte offset in loc, not a field
    if error.get("type") == "json_invalid":
        return "body"
    return ".".join(str(loc) for loc in error["loc"] if loc != "body") or "body"
