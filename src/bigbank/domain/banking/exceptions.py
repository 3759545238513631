"""Banking domain exceptions.

This module defines exceptions specific to the banking bounded context:
transport failures, login rejections, failed session establishment and
out-of-order authentication steps.

Malformed payloads from data endpoints are NOT represented
here; they are reported as missing data by the infrastructure layer.
"""

from bigbank.domain.shared.exceptions import (
    DomainException,
    ErrorCode,
)

# =============================================================================
# Base Banking Exception
# =============================================================================


class BankingDomainError(DomainException):
    """Base exception for banking domain errors."""


# =============================================================================
# Connection Exceptions
# =============================================================================


class BankConnectionError(BankingDomainError):
    """Raised when the bank cannot be reached.

    Covers connection failures and timeouts. These are never retried
    automatically: a half-finished redirect exchange cannot be replayed.
    """

    def __init__(
        self,
        message: str = "Failed to connect to bank",
        url: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.BANK_CONNECTION_FAILED,
            details={"url": url} if url else None,
        )


class BankAuthenticationError(BankConnectionError):
    """Raised when the bank rejects the login or the mTAN.

    The login attempt is over; the user must start again with the
    customer ID and password.
    """

    def __init__(
        self,
        message: str = "Bank authentication failed. Please check your credentials.",
        status: str | None = None,
    ) -> None:
        super().__init__(message=message)
        self.code = ErrorCode.BANK_AUTHENTICATION_FAILED
        self.details = {"status": status} if status else {}


class BankSessionEstablishmentError(BankConnectionError):
    """Raised when the authorization code could not be turned into a session."""

    def __init__(
        self,
        message: str = "Session could not be established.",
    ) -> None:
        super().__init__(message=message)
        self.code = ErrorCode.BANK_SESSION_NOT_ESTABLISHED


class BankSessionNotAuthenticatedError(BankingDomainError):
    """Raised when account data is requested before login completed."""

    def __init__(
        self,
        message: str = "Not logged in to bank. Complete authentication first.",
        state: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.BANK_SESSION_NOT_AUTHENTICATED,
            details={"state": state} if state else None,
        )


# =============================================================================
# TAN Exceptions
# =============================================================================


class TanError(BankingDomainError):
    """Base exception for mTAN-related errors."""


class InvalidAuthStepError(TanError):
    """Raised when an authentication step is invoked out of order."""

    def __init__(self, step: str, state: str) -> None:
        super().__init__(
            message=f"Cannot perform '{step}' while login is in state '{state}'",
            code=ErrorCode.INVALID_AUTH_STEP,
            details={"step": step, "state": state},
        )


class TanRequiredError(TanError):
    """Raised when the bank asks for an mTAN but no way to enter one exists."""

    def __init__(
        self,
        message: str = "This login requires an mTAN. Please use interactive mode.",
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.MTAN_REQUIRED,
        )
