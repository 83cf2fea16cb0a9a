"""Centralized error handling for the API layer.

This module provides consistent error handling across all API endpoints,
mapping domain exceptions to appropriate HTTP responses.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...domain.exceptions import (
    ConfigurationException,
    DomainException,
    InvalidQueryError,
    OrderNotFoundError,
    StateStoreError,
    StateStoreNotConnectedError,
    StoreQueryError,
    StoreWriteError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


class ErrorDetail(BaseModel):
    """Standard error detail model."""

    model_config = ConfigDict(strict=True, frozen=True)

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: dict[str, Any] | None = Field(None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Standard error response model."""

    model_config = ConfigDict(strict=True, frozen=True)

    error: ErrorDetail = Field(..., description="Error information")


# Mapping of domain exception types to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[DomainException], int] = {
    OrderNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidQueryError: status.HTTP_400_BAD_REQUEST,
    StoreWriteError: status.HTTP_502_BAD_GATEWAY,
    StoreQueryError: status.HTTP_502_BAD_GATEWAY,
    StateStoreNotConnectedError: status.HTTP_503_SERVICE_UNAVAILABLE,
    StateStoreError: status.HTTP_502_BAD_GATEWAY,
    ConfigurationException: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _exception_details(exc: DomainException) -> dict[str, Any] | None:
    if isinstance(exc, OrderNotFoundError):
        details = {"order_id": exc.order_id}
        if exc.store_id is not None:
            details["store_id"] = exc.store_id
        return details
    if isinstance(exc, StateStoreError) and exc.store_name:
        details = {"store_name": exc.store_name}
        if exc.key:
            details["key"] = exc.key
        return details
    return None


def create_error_response(
    exception: Exception, status_code: int, details: dict[str, Any] | None = None
) -> JSONResponse:
    """Create a standardized error response.

    Args:
        exception: The exception that occurred
        status_code: HTTP status code
        details: Additional error details

    Returns:
        JSONResponse with error information
    """
    if isinstance(exception, DomainException):
        error_code = exception.error_code
        message = exception.message
    else:
        error_code = "INTERNAL_ERROR"
        message = str(exception) or "An internal error occurred"

    error_response = ErrorResponse(
        error=ErrorDetail(
            code=error_code,
            message=message,
            details=details,
        )
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(),
    )


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Handle domain-specific exceptions.

    The most specific mapped class in the exception's MRO decides the status code.
    """
    logger.warning(
        f"Domain exception on {request.method} {request.url.path}: "
        f"{exc.message} (code: {exc.error_code})"
    )

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for exc_type in type(exc).__mro__:
        if exc_type in EXCEPTION_STATUS_MAP:
            status_code = EXCEPTION_STATUS_MAP[exc_type]
            break

    return create_error_response(exc, status_code, _exception_details(exc))


async def validation_exception_handler(
    request: Request, exc: ValidationError | RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation exceptions."""
    errors = exc.errors()
    logger.warning(f"Validation error on {request.method} {request.url.path}: {len(errors)} errors")

    # Get the first error for the main message
    first_error = errors[0] if errors else {}
    field = ".".join(str(loc) for loc in first_error.get("loc", []))
    msg = first_error.get("msg", "Invalid input data")

    details = {
        "field": field,
        "error_type": first_error.get("type", "validation_error"),
        "errors": [
            {
                "field": ".".join(str(loc) for loc in e.get("loc", [])),
                "message": e.get("msg", ""),
                "type": e.get("type", ""),
            }
            for e in errors
        ],
    }

    error_response = ErrorResponse(
        error=ErrorDetail(
            code="VALIDATION_ERROR",
            message=f"Validation failed for field '{field}': {msg}",
            details=details,
        )
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions with consistent format."""
    logger.info(
        f"HTTP exception on {request.method} {request.url.path}: {exc.status_code} - {exc.detail}"
    )

    error_response = ErrorResponse(
        error=ErrorDetail(
            code=f"HTTP_{exc.status_code}",
            message=str(exc.detail),
        )
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc,
    )

    error_response = ErrorResponse(
        error=ErrorDetail(
            code="INTERNAL_ERROR",
            message="An internal server error occurred",
        )
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers with the FastAPI app."""
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
