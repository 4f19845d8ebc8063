"""
Error handling for the HTTP API.
"""

import traceback

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from cleanops.config.logging import get_logger
from cleanops.domain.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    ImmutabilityViolationError,
    InvalidCoordinatesError,
    InvalidTransitionError,
    InvoiceLockedError,
    NoConflictToResolveError,
    NotFoundError,
    ValidationError,
)
from cleanops.infrastructure.monitoring.metrics import record_error

logger = get_logger(__name__)

# Most specific first: the first matching entry wins
ERROR_RESPONSES = [
    (NotFoundError, 404, "Not Found", "not_found"),
    (ForbiddenError, 403, "Forbidden", "forbidden"),
    (NoConflictToResolveError, 400, "No Conflict To Resolve", "no_conflict_to_resolve"),
    (InvalidTransitionError, 400, "Invalid Transition", "invalid_transition"),
    (InvoiceLockedError, 400, "Invoice Locked", "invoice_locked"),
    (ConflictError, 409, "Conflict", "conflict"),
    (InvalidCoordinatesError, 422, "Invalid Coordinates", "invalid_coordinates"),
    (ValidationError, 422, "Validation Error", "validation_error"),
    (ImmutabilityViolationError, 500, "Immutability Violation", "immutability_violation"),
]


def error_response_for(exc: DomainError):
    """Return (status_code, error, type) for a domain exception."""
    for exc_class, status_code, error, error_type in ERROR_RESPONSES:
        if isinstance(exc, exc_class):
            return status_code, error, error_type
    return 400, "Domain Error", "domain_error"


def add_error_handlers(app: FastAPI) -> None:
    """Add custom error handlers to FastAPI app."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        status_code, error, error_type = error_response_for(exc)
        record_error(error_type)

        log = logger.warning if status_code < 500 else logger.error
        log(
            error,
            error=str(exc),
            error_type=error_type,
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(
            status_code=status_code,
            content={"error": error, "message": str(exc), "type": error_type},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        record_error("validation_error")
        logger.warning("Request validation error", errors=exc.errors(), path=request.url.path)
        return JSONResponse(
            status_code=422,
            content={
                "error": "Validation Error",
                "message": "; ".join(
                    f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                    for err in exc.errors()
                ),
                "type": "validation_error",
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        record_error("database_error")
        logger.error("Database error", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Database Error",
                "message": "A database error occurred",
                "type": "database_error",
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "HTTP Error",
                "message": exc.detail,
                "type": "http_error",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        record_error("internal_error")
        logger.error(
            "Unhandled exception",
            error=str(exc),
            path=request.url.path,
            traceback=traceback.format_exc(),
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred",
                "type": "internal_error",
            },
        )
