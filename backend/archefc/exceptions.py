"""
Centralized Exception Handling for the Arche FC backend
Provides standardized error responses across the API.
"""
from typing import Optional, Dict, Any
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
import logging

logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Base exception class for application-specific errors.

    All custom exceptions should inherit from this class to ensure
    consistent error handling and response formatting.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (default: 500)
            error_code: Machine-readable error code (e.g., "VALIDATION_ERROR")
            details: Additional error details dictionary
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppException):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
            details=details
        )


class AuthenticationError(AppException):
    """Raised for bad credentials or a missing/invalid bearer token."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="AUTHENTICATION_ERROR"
        )


class AuthorizationError(AppException):
    """Raised when an authenticated user lacks the required role."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="AUTHORIZATION_ERROR"
        )


class NotFoundError(AppException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} not found"
        if identifier:
            message += f": {identifier}"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            details={"resource": resource, "identifier": identifier}
        )


class ConfigurationNotFoundError(NotFoundError):
    """Raised when no FFF team configuration exists at a team index."""

    def __init__(self, team_index: int):
        super().__init__("Team configuration", str(team_index))
        self.error_code = "CONFIGURATION_NOT_FOUND"
        self.team_index = team_index


class ConflictError(AppException):
    """Raised when a write would violate a uniqueness rule."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="CONFLICT",
            details=details
        )


class DatabaseError(AppException):
    """Raised when a database operation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="DATABASE_ERROR",
            details=details
        )


class ExternalAPIError(AppException):
    """Raised when an external API call fails."""

    def __init__(self, service: str, message: str, details: Optional[Dict[str, Any]] = None):
        full_message = f"External API error ({service}): {message}"
        super().__init__(
            message=full_message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code="EXTERNAL_API_ERROR",
            details={"service": service, **details} if details else {"service": service}
        )

    @property
    def upstream_status(self) -> Optional[int]:
        """HTTP status returned by the upstream API, if it answered at all."""
        return self.details.get("upstream_status")


def create_error_response(
    exception: AppException,
    include_traceback: bool = False
) -> JSONResponse:
    """
    Create standardized error response from AppException.

    Args:
        exception: AppException instance
        include_traceback: Whether to include traceback in response (default: False for security)

    Returns:
        JSONResponse with standardized error format
    """
    response_data = {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "status_code": exception.status_code
        }
    }

    # Add details if present
    if exception.details:
        response_data["error"]["details"] = exception.details

    # Include traceback only in development/debug mode
    if include_traceback:
        import traceback
        response_data["error"]["traceback"] = traceback.format_exc()

    headers = None
    if exception.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exception.status_code,
        content=response_data,
        headers=headers
    )


def handle_app_exception(exception: AppException) -> JSONResponse:
    """
    Handle AppException and return standardized response.

    Args:
        exception: AppException instance

    Returns:
        JSONResponse with error details
    """
    log = logger.error if exception.status_code >= 500 else logger.warning
    log(
        f"AppException: {exception.error_code} - {exception.message}",
        extra={"error_code": exception.error_code, "details": exception.details}
    )
    return create_error_response(exception, include_traceback=False)


def handle_generic_exception(exception: Exception) -> JSONResponse:
    """
    Handle generic exceptions and convert to standardized format.

    The original error text is logged but never sent to the client.

    Args:
        exception: Generic Exception instance

    Returns:
        JSONResponse with error details
    """
    logger.error(f"Unhandled exception: {str(exception)}", exc_info=True)

    app_exception = AppException(
        message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code="INTERNAL_ERROR"
    )

    return create_error_response(app_exception, include_traceback=False)


HTTP_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def handle_http_exception(exception: HTTPException) -> JSONResponse:
    """
    Handle Starlette/FastAPI HTTPException and convert to standardized format.

    Args:
        exception: HTTPException instance

    Returns:
        JSONResponse with standardized error format
    """
    logger.warning(f"HTTPException: {exception.status_code} - {exception.detail}")

    response_data = {
        "error": {
            "code": HTTP_ERROR_CODES.get(exception.status_code, "HTTP_ERROR"),
            "message": exception.detail,
            "status_code": exception.status_code
        }
    }

    return JSONResponse(
        status_code=exception.status_code,
        content=response_data,
        headers=getattr(exception, "headers", None)
    )


def handle_request_validation_error(exception: RequestValidationError) -> JSONResponse:
    """Convert FastAPI body/query validation failures to the standard format."""
    logger.warning(f"Request validation failed: {exception.errors()}")

    response_data = {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request",
            "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
            "details": {"errors": jsonable_errors(exception)}
        }
    }

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=response_data
    )


def jsonable_errors(exception: RequestValidationError) -> list:
    """Keep only the JSON-safe parts of pydantic error entries."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exception.errors()
    ]
