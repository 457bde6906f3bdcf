"""Error handling module with RFC 7807 Problem Details."""

from sitekit.core.errors.exceptions import (
    ApiError,
    AppException,
    ConfigurationError,
    ServiceUnavailableError,
)
from sitekit.core.errors.handlers import ProblemDetail, register_exception_handlers


__all__ = [
    "ApiError",
    "AppException",
    "ConfigurationError",
    "ProblemDetail",
    "ServiceUnavailableError",
    "register_exception_handlers",
]
