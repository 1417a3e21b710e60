import traceback
from typing import Any, Dict, Optional
from fastapi import status

from alumni_portal.core.config import is_production


class BaseAPIError(Exception):
    """Base exception class for API errors"""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

class AuthenticationError(BaseAPIError):
    """Raised when the portal backend rejects the caller's token"""
    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "AUTH_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=error_code,
            details=details
        )

class PermissionDenied(BaseAPIError):
    """Raised when the viewer is not offered the requested action"""
    def __init__(
        self,
        message: str = "Permission denied",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="PERMISSION_DENIED",
            details=details
        )

class ValidationError(BaseAPIError):
    """Raised when input validation fails; no network call is made"""
    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="VALIDATION_ERROR",
            details=details
        )

class NotFoundError(BaseAPIError):
    """Raised when a requested resource is not found"""
    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            details=details
        )

class NetworkError(BaseAPIError):
    """Raised when the portal backend cannot be reached"""
    def __init__(
        self,
        message: str = "Portal backend is unreachable",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="NETWORK_ERROR",
            details=details
        )

class ServerError(BaseAPIError):
    """Raised when the portal backend answers with an error status"""
    def __init__(
        self,
        message: str = "Portal backend error",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code="SERVER_ERROR",
            details=details
        )


def get_error_message(
    error: BaseAPIError,
    include_details: bool = True
) -> Dict[str, Any]:
    """
    Formats an API error into the response structure used by every endpoint.

    Args:
        error: The BaseAPIError that was raised
        include_details: Whether to include error details, the error type and,
            outside production, the traceback

    Returns:
        Dict containing formatted error response with message, code, and optional details
    """
    error_response = {
        "success": False,
        "error_code": error.error_code,
        "message": str(error.message),
        "status_code": error.status_code
    }

    if include_details:
        if error.details:
            error_response["details"] = error.details
        error_response["error_type"] = error.__class__.__name__

        if not is_production() and error.__traceback__ is not None:
            error_response["traceback"] = traceback.format_exception(
                type(error), error, error.__traceback__
            )

    return error_response
