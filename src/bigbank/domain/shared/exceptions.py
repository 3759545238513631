"""Shared domain exceptions and error codes.

Every error the connector raises on purpose is a DomainException carrying a
stable ErrorCode, so callers (CLI, host applications) can handle them in one
place and report the code instead of parsing messages.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for callers of the connector.

    These codes are part of the public contract. Should not be changed.
    """

    # Input
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Login conversation
    INVALID_AUTH_STEP = "INVALID_AUTH_STEP"
    MTAN_REQUIRED = "MTAN_REQUIRED"

    # Bank communication
    BANK_CONNECTION_FAILED = "BANK_CONNECTION_FAILED"
    BANK_AUTHENTICATION_FAILED = "BANK_AUTHENTICATION_FAILED"
    BANK_SESSION_NOT_ESTABLISHED = "BANK_SESSION_NOT_ESTABLISHED"
    BANK_SESSION_NOT_AUTHENTICATED = "BANK_SESSION_NOT_AUTHENTICATED"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainException(Exception):  # NOQA: N818
    """Base exception for all connector errors.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    code
        Stable error code for programmatic handling
    details
        Optional context such as the HTTP path or the server status; never
        contains credentials or authorization codes
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code.value}: {self.message!r})"


class ValidationError(DomainException):
    """Raised when user input is rejected before anything is sent to the bank."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            message,
            code=ErrorCode.VALIDATION_ERROR,
            details={"field": field} if field else None,
        )
