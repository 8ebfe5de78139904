"""Global exception handlers that map domain and store exceptions to HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.errors import (
    ALREADY_EXISTS,
    CANCELLED,
    INTERNAL_ERROR,
    NOT_FOUND,
    UNAUTHORIZED,
    VALIDATION_ERROR,
    AlreadyExistsError,
    DomainValidationError,
    InternalStoreError,
    NotFoundError,
    OperationCancelledError,
    UnauthorizedError,
)
from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int, detail: str, code: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def domain_validation_error_handler(
    _request: Request, exc: DomainValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        str(exc),
        VALIDATION_ERROR,
    )


def already_exists_error_handler(
    _request: Request, exc: AlreadyExistsError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        ALREADY_EXISTS,
    )


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        status.HTTP_404_NOT_FOUND,
        str(exc),
        NOT_FOUND,
    )


def unauthorized_error_handler(_request: Request, exc: UnauthorizedError) -> JSONResponse:
    return _error_response(
        status.HTTP_401_UNAUTHORIZED,
        str(exc),
        UNAUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )


def cancelled_error_handler(
    request: Request, exc: OperationCancelledError
) -> JSONResponse:
    logger.warning("Request aborted: %s %s: %s", request.method, request.url.path, exc)
    return _error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        str(exc),
        CANCELLED,
    )


def internal_store_error_handler(
    request: Request, exc: InternalStoreError
) -> JSONResponse:
    # Full context stays in the server log; the client only gets an opaque message.
    logger.error(
        "Request failed: %s %s", request.method, request.url.path, exc_info=exc
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        INTERNAL_ERROR,
    )


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainValidationError, domain_validation_error_handler)
    app.add_exception_handler(AlreadyExistsError, already_exists_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_error_handler)
    app.add_exception_handler(OperationCancelledError, cancelled_error_handler)
    app.add_exception_handler(InternalStoreError, internal_store_error_handler)
