"""User-facing messages for platform API errors.

The platform reports failures as structured ``{code, message}`` bodies. Only
validation-class codes are safe to show verbatim; everything else goes
through a fixed lookup so that internal server wording never reaches users.

Usage:
    try:
        await api.update_employee(employee_id, site_id=3)
    except AdminConsoleError as e:
        print(surface_message(e))
"""

from .exceptions import APIError, PermissionDeniedError

GENERIC_ERROR_MESSAGE = "An unexpected error occurred."
GENERIC_SERVER_ERROR_MESSAGE = "A server error occurred."

ERROR_MESSAGES: dict[str, str] = {
    # Request contract (400/422)
    "MISSING_REQUIRED_PARAM": "A required value is missing. Please check your input.",
    "INVALID_REQUEST_PARAM": "A request value has an invalid format. Please check your input.",
    "INVALID_REQUEST_PAYLOAD": "The request is invalid. Please try again.",
    # Attendance rules
    "ALREADY_CHECKED_IN": "Already checked in.",
    "NOT_CHECKED_IN": "Cannot check out without a check-in record.",
    "ALREADY_CHECKED_OUT": "Already checked out.",
    # Admin rules
    "SITE_INACTIVE": "The site is inactive.",
    "EMPLOYEE_NOT_FOUND": "Employee not found.",
    "EMPLOYEE_INACTIVE": "The employee is inactive.",
    # Auth
    "UNAUTHORIZED": "Please sign in again.",
    "FORBIDDEN": "You do not have permission to perform this action.",
}


def to_user_message(err: BaseException) -> str:
    """Map any error to a generic, user-safe message.

    Args:
        err: Exception raised by the transport or the platform

    Returns:
        Fixed message for known codes, a generic fallback otherwise
    """
    if isinstance(err, PermissionDeniedError):
        return ERROR_MESSAGES["FORBIDDEN"]
    if not isinstance(err, APIError):
        return GENERIC_ERROR_MESSAGE
    return ERROR_MESSAGES.get(err.code, GENERIC_SERVER_ERROR_MESSAGE)


def surface_message(err: BaseException) -> str:
    """Message to show for a failed single operation.

    Validation-class errors carry the server's explanation of what was wrong
    with the request, so they are surfaced as-is.
    """
    if isinstance(err, APIError) and err.is_validation_error:
        return err.message
    return to_user_message(err)


def failure_reason(err: BaseException) -> str:
    """Reason string recorded for one failed item of a batch."""
    if isinstance(err, APIError):
        return err.message
    return to_user_message(err)


__all__ = [
    "ERROR_MESSAGES",
    "GENERIC_ERROR_MESSAGE",
    "GENERIC_SERVER_ERROR_MESSAGE",
    "to_user_message",
    "surface_message",
    "failure_reason",
]
