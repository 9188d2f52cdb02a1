"""
Custom exception classes and error handling for restty.

Provides consistent error responses across all API endpoints.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""
    detail: str
    error_code: str | None = None


class APIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None
    ):
        self.detail = detail
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(detail)


class ResourceNotFoundError(APIException):
    """Exception raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            detail=f"{resource_type} with id {resource_id} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND"
        )


class RequestInFlightError(APIException):
    """Exception raised when a send is issued while another is still running."""

    def __init__(self, detail: str = "A request is already in flight"):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_409_CONFLICT,
            error_code="REQUEST_IN_FLIGHT"
        )


class AuthError(APIException):
    """
    Exception raised when sign-in or sign-up is rejected.

    kind is one of: invalid_credentials, email_not_confirmed,
    already_registered, confirmation_required, connection, failed.
    """

    def __init__(self, detail: str, kind: str = "failed"):
        self.kind = kind
        super().__init__(
            detail=detail,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=f"AUTH_{kind.upper()}"
        )


class RemoteStoreError(Exception):
    """Raised by the remote history store client; never reaches the API surface."""

    def __init__(self, operation: str, detail: str, status_code: int | None = None):
        self.operation = operation
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{operation} failed: {detail}")


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handler for custom API exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code}
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    errors = exc.errors()
    # Format validation errors into a readable message
    error_messages = []
    for error in errors:
        loc = " -> ".join(str(l) for l in error["loc"])
        error_messages.append(f"{loc}: {error['msg']}")

    detail = "; ".join(error_messages) if error_messages else "Validation error"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": detail, "error_code": "VALIDATION_ERROR"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
