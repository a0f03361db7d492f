"""Attendance platform API modules.

This package provides the HTTP client and the admin resource endpoints used
by the console, plus the error types and user-facing error messages.

Classes:
    AdminApiClient: Generic HTTP client with retry for reads
    AdminApi: Admin endpoints (sites, employees, assignments, corrections)

Exceptions:
    AdminConsoleError: Base exception for all console errors
    ConfigurationError: Missing or invalid configuration
    APIError: Structured platform error
    NetworkError: Network connectivity issues
"""
from .admin_api import AdminApi
from .client import AdminApiClient
from .error_messages import failure_reason, surface_message, to_user_message
from .exceptions import (
    UNEXPECTED_ERROR_FORMAT,
    VALIDATION_ERROR_CODES,
    AdminConsoleError,
    APIError,
    ConfigurationError,
    PermissionDeniedError,
    ConnectionError,
    NetworkError,
    NotFoundError,
    ServerError,
    TimeoutError,
)

__all__ = [
    # Client
    "AdminApiClient",
    "AdminApi",
    # Exceptions
    "AdminConsoleError",
    "ConfigurationError",
    "PermissionDeniedError",
    "APIError",
    "NotFoundError",
    "ServerError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "VALIDATION_ERROR_CODES",
    "UNEXPECTED_ERROR_FORMAT",
    # Messages
    "to_user_message",
    "surface_message",
    "failure_reason",
]
