"""Domain exceptions for the application.

These exceptions represent errors raised by the supporting libraries and
are converted to RFC 7807 Problem Details responses by the exception
handlers when they escape a request.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(AppException):
    """Raised when a required configuration item is missing.

    Example:
        raise ConfigurationError(key="REDIS_URL")
    """

    message = "Configuration item not found"
    error_code = "configuration_error"
    status_code = 500

    def __init__(
        self,
        message: str | None = None,
        key: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if key:
            details["key"] = key
            message = message or f"Configuration item {key} not found"
        self.key = key
        super().__init__(message=message, details=details, **kwargs)


class ApiError(AppException):
    """Raised when an upstream API responds with a non-success status.

    The upstream status code is carried through so handlers can mirror it.

    Example:
        raise ApiError("Not allowed", status_code=403, details={"url": url})
    """

    message = "API request error encountered"
    error_code = "api_error"
    status_code = 502

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message=message, **kwargs)


class ServiceUnavailableError(AppException):
    """Raised when a required service is unavailable.

    Example:
        raise ServiceUnavailableError("Cache connection failed")
    """

    message = "Service temporarily unavailable"
    error_code = "service_unavailable"
    status_code = 503
