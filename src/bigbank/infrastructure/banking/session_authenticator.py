"""Two-step login against the Bigbank auth service.

Step 1 posts customer ID and password; the bank either finishes the login
or asks for an SMS mTAN (step 2). A successful login yields an
authorization code, which is not a session by itself: it has to be sent
through the auth service's /redirect endpoint. That endpoint looks up the
redirect target stored for our auth cookie during the initial portal visit
and bounces the browser back into the banking portal, which then issues the
session cookie. Calling the portal with the code directly does not work.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from bigbank.domain.banking.exceptions import (
    BankAuthenticationError,
    BankingDomainError,
    BankSessionEstablishmentError,
    InvalidAuthStepError,
)
from bigbank.domain.banking.value_objects import AuthChallenge, BankCredentials
from bigbank.domain.shared.exceptions import ValidationError
from bigbank.infrastructure.banking.bank_session import AuthState, BankSession

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/auth/customer-id/login"
OTP_PATH = "/api/auth/customer-id/submit/otp"
REDIRECT_PATH = "/redirect"
VERIFY_USER_PATH = "/gw/verifyUser"

EXCHANGE_METHOD = "customerid"

STATUS_MFA_REQUIRED = "MFA_REQUIRED"
STATUS_LOGIN_SUCCESSFUL = "LOGIN_SUCCESSFUL"


class AuthorizationCodeExchange:
    """Turn an authorization code into a cookie-based banking session.

    The exchange consumes server-side state and is attempted exactly once
    per code.
    """

    def __init__(self, session: BankSession):
        self._session = session

    async def exchange(self, code: str) -> None:
        logger.info("Exchanging authorization code...")
        self._session.authorization_code = code
        try:
            await self._session.navigate(
                self._session.auth_url(REDIRECT_PATH),
                params={"code": code, "method": EXCHANGE_METHOD},
            )
        finally:
            self._session.authorization_code = None

    async def verify(self) -> bool:
        """Ask the portal whether the current cookies form a logged-in session."""
        result = await self._session.post_json(
            self._session.banking_url(VERIFY_USER_PATH),
            {},
        )
        if not isinstance(result, dict):
            logger.warning("Session check returned no usable payload")
            return False
        return bool(result.get("isLoggedIn"))


class SessionAuthenticator:
    """Drive the login state machine of a BankSession.

    States: AWAITING_PRIMARY_CREDENTIALS -> AWAITING_ONE_TIME_CODE ->
    AUTHENTICATED, with FAILED as the end of an unsuccessful attempt. A
    failed attempt can only be restarted with `submit_credentials()`.
    """

    def __init__(
        self,
        session: BankSession,
        code_exchange: Optional[AuthorizationCodeExchange] = None,
    ):
        self._session = session
        self._code_exchange = code_exchange or AuthorizationCodeExchange(session)

    @property
    def state(self) -> AuthState:
        return self._session.state

    async def submit_credentials(
        self,
        credentials: BankCredentials,
    ) -> Optional[AuthChallenge]:
        """Step 1: log in with customer ID and password.

        Returns an AuthChallenge when an mTAN is required, None when the
        session is already authenticated.
        """
        if self._session.state in (AuthState.AUTHENTICATED, AuthState.LOGGED_OUT):
            raise InvalidAuthStepError("submit_credentials", self._session.state.value)

        self._session.reset()
        logger.info("Starting login")

        try:
            # Provisions the auth cookie and the server-side redirect state
            await self._session.navigate(self._session.banking_url("/"))

            result = await self._session.post_json(
                self._session.auth_url(LOGIN_PATH),
                {
                    "username": credentials.customer_id.get_secret_value(),
                    "password": credentials.password.get_secret_value(),
                },
            )
            status = _status_of(result)

            if status == STATUS_MFA_REQUIRED:
                recipient = str(result.get("recipient") or "")
                self._session.state = AuthState.AWAITING_ONE_TIME_CODE
                logger.info("mTAN required, sent to %s", recipient or "unknown")
                return AuthChallenge.for_mtan(recipient)

            if status == STATUS_LOGIN_SUCCESSFUL:
                logger.info("Login accepted without mTAN")
                await self._establish_session(result)
                return None

            logger.warning("Login rejected with status %s", status)
            raise BankAuthenticationError(status=status)

        except BankingDomainError:
            self._session.state = AuthState.FAILED
            raise

    async def submit_otp(self, otp: str) -> None:
        """Step 2: submit the mTAN received by SMS."""
        if self._session.state is not AuthState.AWAITING_ONE_TIME_CODE:
            raise InvalidAuthStepError("submit_otp", self._session.state.value)

        otp = otp.strip()
        if not otp:
            msg = "mTAN must not be empty"
            raise ValidationError(msg, field="otp")

        try:
            result = await self._session.post_json(
                self._session.auth_url(OTP_PATH),
                {"otp": otp},
            )
            status = _status_of(result)

            if status != STATUS_LOGIN_SUCCESSFUL:
                logger.warning("mTAN rejected with status %s", status)
                raise BankAuthenticationError(
                    message="The mTAN was not accepted. Please log in again.",
                    status=status,
                )

            logger.info("mTAN accepted")
            await self._establish_session(result)

        except BankingDomainError:
            self._session.state = AuthState.FAILED
            raise

    async def _establish_session(self, result: dict[str, Any]) -> None:
        code = result.get("authorizationCode")
        if code:
            await self._code_exchange.exchange(str(code))
        else:
            logger.warning("Login succeeded without authorization code")

        if not await self._code_exchange.verify():
            logger.error("Session could not be established")
            raise BankSessionEstablishmentError()

        self._session.state = AuthState.AUTHENTICATED
        logger.info("Session established")


def _status_of(result: Any) -> str | None:
    if not isinstance(result, dict):
        return None
    status = result.get("status")
    return str(status) if status is not None else None
