"""Error classification utilities for remote sync and integration failures.

Every failure degrades to "continue locally"; classification only feeds logs and
the status endpoint so an operator can tell an unreachable store from a rejection.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel


class ErrorCategory(Enum):
    """Categories of errors raised by the remote store and optional integrations."""

    NETWORK_ERROR = "network_error"
    REMOTE_REJECTED = "remote_rejected"
    RECORD_NOT_FOUND = "record_not_found"
    AUTHENTICATION_FAILED = "authentication_failed"
    INTEGRATION_UNAVAILABLE = "integration_unavailable"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorResponse(BaseModel):
    """Structured error description for the status endpoint and logs."""

    category: ErrorCategory
    message: str
    severity: ErrorSeverity


PatternType = Literal["not_found", "auth", "network", "rejected", "unavailable"]

_ERROR_PATTERNS: dict[PatternType, dict[str, list[str] | set[str]]] = {
    "not_found": {
        "phrases": ["not found", "no row", "404"],
        "exception_types": {"RecordNotFoundError", "KeyError"},
    },
    "auth": {
        "phrases": [
            "unauthorized",
            "invalid api key",
            "jwt",
            "not authenticated",
            "credential not configured",
            "401",
            "403",
        ],
        "exception_types": {"AuthenticationError", "PermissionError"},
    },
    "network": {
        "phrases": [
            "connection",
            "timeout",
            "timed out",
            "network",
            "unreachable",
            "502",
            "503",
            "504",
        ],
        "exception_types": {"ConnectError", "ConnectTimeout", "ReadTimeout", "ConnectionError", "TimeoutError"},
    },
    "rejected": {
        "phrases": ["violates", "duplicate key", "invalid input", "400", "409", "422"],
        "exception_types": set(),
    },
    "unavailable": {
        "phrases": ["unavailable", "not connected"],
        "exception_types": set(),
    },
}


class LoginRequiredError(PermissionError):
    """Raised when an action needs a logged-in member and there is none."""


def _match_error_pattern(*, error_str: str, exception_type: str, pattern_type: PatternType) -> bool:
    """Return True if the error matches the configured pattern type."""
    patterns = _ERROR_PATTERNS[pattern_type]
    return any(phrase in error_str for phrase in patterns["phrases"]) or exception_type in patterns["exception_types"]


def classify_sync_error(exception: BaseException) -> tuple[ErrorCategory, str]:
    """Classify a remote or integration failure and return a user-facing message.

    Args:
        exception: The exception raised by the remote call

    Returns:
        Tuple of (ErrorCategory, user_friendly_message)
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="unavailable"):
        return (
            ErrorCategory.INTEGRATION_UNAVAILABLE,
            "The integration is not connected. Working with local data only.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="network"):
        return (
            ErrorCategory.NETWORK_ERROR,
            "Could not reach the server. Changes are kept on this device.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="auth"):
        return (
            ErrorCategory.AUTHENTICATION_FAILED,
            "The server refused our credentials. Changes are kept on this device.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="not_found"):
        return (
            ErrorCategory.RECORD_NOT_FOUND,
            "The server no longer has this record. Changes are kept on this device.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="rejected"):
        return (
            ErrorCategory.REMOTE_REJECTED,
            "The server rejected the change. Changes are kept on this device.",
        )

    return (
        ErrorCategory.UNKNOWN,
        "An unexpected error occurred. Changes are kept on this device.",
    )


def classify_error_with_response(exception: BaseException) -> ErrorResponse:
    """Classify an error and attach a severity for reporting."""
    category, message = classify_sync_error(exception)
    severity = {
        ErrorCategory.INTEGRATION_UNAVAILABLE: ErrorSeverity.LOW,
        ErrorCategory.RECORD_NOT_FOUND: ErrorSeverity.LOW,
        ErrorCategory.NETWORK_ERROR: ErrorSeverity.MEDIUM,
        ErrorCategory.REMOTE_REJECTED: ErrorSeverity.MEDIUM,
        ErrorCategory.AUTHENTICATION_FAILED: ErrorSeverity.HIGH,
    }.get(category, ErrorSeverity.MEDIUM)
    return ErrorResponse(category=category, message=message, severity=severity)
