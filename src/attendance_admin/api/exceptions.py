#!/usr/bin/env python3
"""Exception Hierarchy for the Attendance Platform Admin API.

This module provides a structured exception hierarchy for handling errors
raised by the admin console transport: configuration, structured API
errors returned by the platform, and network failures.

Design Principles:
    - All exceptions inherit from AdminConsoleError base class
    - Exceptions preserve context (original error, timestamps, details)
    - Exceptions are categorized by recoverability
    - Structured platform errors keep the server's code and message intact

Exception Hierarchy:
    AdminConsoleError (base)
    ├── ConfigurationError (unrecoverable - fix config)
    ├── PermissionDeniedError (actor role check, no call made)
    ├── APIError (structured {code, message} or unexpected error body)
    │   ├── NotFoundError
    │   └── ServerError
    └── NetworkError (recoverable - retry)
        ├── ConnectionError
        └── TimeoutError

The platform reports failures as ``{"code": ..., "message": ...}``. Two codes
are validation-class and are shown to users verbatim; every other code is
translated through the lookup in ``error_messages``.
"""
from datetime import datetime, timezone
from typing import Any, Optional

# Codes whose server message is safe and meaningful to show verbatim
VALIDATION_ERROR_CODES = frozenset({"INVALID_REQUEST_PARAM", "INVALID_REQUEST_PAYLOAD"})

# Code assigned when an error body does not carry {code, message}
UNEXPECTED_ERROR_FORMAT = "UNEXPECTED_ERROR_FORMAT"


# ============================================
# Base Exception
# ============================================

class AdminConsoleError(Exception):
    """Base exception for all admin console errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "SITE_INACTIVE")
        details: Additional context as a dictionary
        timestamp: When the error occurred
        cause: The original exception that caused this error
        recoverable: Whether this error might be recoverable with retry
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)
        self.cause = cause
        self.recoverable = recoverable

        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.insert(0, f"[{self.code}]")
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "cause": str(self.cause) if self.cause else None,
        }


# ============================================
# Configuration Errors (Unrecoverable)
# ============================================

class ConfigurationError(AdminConsoleError):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list[str]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(
            message,
            code="CONFIGURATION_ERROR",
            details=details,
            recoverable=False,
            **kwargs,
        )


class PermissionDeniedError(AdminConsoleError):
    """Raised when the actor's role does not allow an operation.

    Raised client-side, before any remote call is made.
    """

    def __init__(
        self,
        message: str = "You do not have permission to perform this action.",
        **kwargs,
    ):
        super().__init__(
            message,
            code="FORBIDDEN",
            recoverable=False,
            **kwargs,
        )


# ============================================
# API Errors
# ============================================

class APIError(AdminConsoleError):
    """Error response returned by the platform API.

    ``code`` and ``message`` are the server's own values when the body was a
    structured error, otherwise ``UNEXPECTED_ERROR_FORMAT`` and a generic
    ``Request failed (<status>)`` message.

    Attributes:
        status_code: HTTP status code
        endpoint: API endpoint that was called
        method: HTTP method used
        response_body: Raw response body (may be truncated)
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        endpoint: Optional[str] = None,
        response_body: Optional[str] = None,
        method: str = "GET",
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["status_code"] = status_code
        if endpoint:
            details["endpoint"] = endpoint
        if method:
            details["method"] = method
        if response_body:
            details["response_body"] = response_body[:500]

        kwargs.setdefault("recoverable", status_code in (429, 500, 502, 503, 504))
        kwargs.setdefault("code", UNEXPECTED_ERROR_FORMAT)

        super().__init__(
            message,
            details=details,
            **kwargs,
        )
        self.status_code = status_code
        self.endpoint = endpoint
        self.response_body = response_body
        self.method = method

    @property
    def is_validation_error(self) -> bool:
        """True when the server flagged the request itself as invalid."""
        return self.code in VALIDATION_ERROR_CODES


class NotFoundError(APIError):
    """Raised when the requested resource does not exist (HTTP 404)."""

    def __init__(self, message: str = "Resource not found", **kwargs):
        kwargs.setdefault("status_code", 404)
        kwargs.setdefault("recoverable", False)
        super().__init__(message, **kwargs)


class ServerError(APIError):
    """Raised when the server returns a 5xx error."""

    def __init__(self, message: str = "Server error", **kwargs):
        kwargs.setdefault("status_code", 500)
        kwargs.setdefault("recoverable", True)
        super().__init__(message, **kwargs)


# ============================================
# Network Errors (Usually Recoverable)
# ============================================

class NetworkError(AdminConsoleError):
    """Base class for transport failures that carry no server code."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", True)
        super().__init__(message, **kwargs)


class ConnectionError(NetworkError):
    """Raised when connection to server fails."""

    def __init__(
        self,
        message: str = "Failed to connect to server",
        host: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if host:
            details["host"] = host
        super().__init__(
            message,
            code="CONNECTION_ERROR",
            details=details,
            **kwargs,
        )


class TimeoutError(NetworkError):
    """Raised when request times out."""

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: Optional[float] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(
            message,
            code="TIMEOUT_ERROR",
            details=details,
            **kwargs,
        )


__all__ = [
    "VALIDATION_ERROR_CODES",
    "UNEXPECTED_ERROR_FORMAT",
    "AdminConsoleError",
    "ConfigurationError",
    "PermissionDeniedError",
    "APIError",
    "NotFoundError",
    "ServerError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
]
