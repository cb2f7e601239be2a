"""Translate domain and storage exceptions into HTTP responses"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from finance_api.domain.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    ConflictError,
    DomainException,
    DomainValidationError,
    NotFoundError,
    StorageError,
)

# Most specific first
STATUS_BY_EXCEPTION = [
    (DomainValidationError, 422),
    (NotFoundError, 404),
    (ConflictError, 409),
    (AccessDeniedError, 403),
    (AuthenticationError, 401),
    (StorageError, 500),
]


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = next(
        (status for exc_type, status in STATUS_BY_EXCEPTION if isinstance(exc, exc_type)),
        400,
    )
    extra = {"request_id": _request_id(request), "path": request.url.path, "status": status_code}

    if status_code >= 500:
        logging.error(f"Storage failure: {exc}", extra=extra)
        return JSONResponse(status_code=status_code, content={"error": "Internal server error"})

    if isinstance(exc, AuthenticationError):
        extra["reason"] = exc.reason
    logging.warning(f"{type(exc).__name__}: {exc}", extra=extra)

    content = {"error": str(exc)}
    if isinstance(exc, ConflictError) and exc.count is not None:
        content["count"] = exc.count
    return JSONResponse(status_code=status_code, content=content)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Unique constraint lost a race with a concurrent insert"""
    logging.warning(f"Integrity error: {exc.orig}", extra={"request_id": _request_id(request)})
    return JSONResponse(status_code=409, content={"error": "Record conflicts with an existing one"})


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logging.error(f"Unexpected database error: {exc}", extra={"request_id": _request_id(request)})
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
