"""Unit tests for the two-step login and the authorization code exchange.

All tests run against the in-memory fake portal, so cookies and redirects
flow through a real httpx client.
"""

import httpx
import pytest

from bigbank.domain.banking.exceptions import (
    BankAuthenticationError,
    BankConnectionError,
    BankSessionEstablishmentError,
    InvalidAuthStepError,
)
from bigbank.domain.banking.value_objects import BankCredentials
from bigbank.domain.shared.exceptions import ErrorCode, ValidationError
from bigbank.infrastructure.banking import (
    AuthorizationCodeExchange,
    AuthState,
    BankSession,
    SessionAuthenticator,
)
from tests.shared.fixtures.bigbank_server import (
    CUSTOMER_ID,
    OTP,
    PASSWORD,
    RECIPIENT,
)


@pytest.fixture
def credentials() -> BankCredentials:
    return BankCredentials.from_plain(CUSTOMER_ID, PASSWORD)


@pytest.fixture
def authenticator(session) -> SessionAuthenticator:
    return SessionAuthenticator(session)


# ═══════════════════════════════════════════════════════════════
#              Step 1: customer ID and password
# ═══════════════════════════════════════════════════════════════


class TestSubmitCredentials:
    @pytest.mark.asyncio
    async def test_mfa_required_returns_mtan_challenge(self, authenticator, credentials):
        challenge = await authenticator.submit_credentials(credentials)

        assert challenge is not None
        assert challenge.title == "mTAN Eingabe"
        assert challenge.label == "mTAN-Code"
        assert challenge.recipient == RECIPIENT
        assert challenge.challenge_text == (
            f"Bitte geben Sie den mTAN-Code ein, der an {RECIPIENT} gesendet wurde."
        )
        assert authenticator.state is AuthState.AWAITING_ONE_TIME_CODE

    @pytest.mark.asyncio
    async def test_visits_portal_before_posting_credentials(
        self,
        authenticator,
        credentials,
        fake_bank,
    ):
        await authenticator.submit_credentials(credentials)

        assert fake_bank.paths() == ["/", "/login", "/api/auth/customer-id/login"]

    @pytest.mark.asyncio
    async def test_login_without_mfa_establishes_session(
        self,
        authenticator,
        credentials,
        fake_bank,
        session,
    ):
        fake_bank.login_status = "LOGIN_SUCCESSFUL"

        challenge = await authenticator.submit_credentials(credentials)

        assert challenge is None
        assert session.authenticated
        assert len(fake_bank.requests_to("/redirect")) == 1

    @pytest.mark.asyncio
    async def test_rejected_credentials_fail_the_attempt(self, session, fake_bank):
        authenticator = SessionAuthenticator(session)
        wrong = BankCredentials.from_plain(CUSTOMER_ID, "falsch")

        with pytest.raises(BankAuthenticationError) as exc_info:
            await authenticator.submit_credentials(wrong)

        assert exc_info.value.code is ErrorCode.BANK_AUTHENTICATION_FAILED
        assert exc_info.value.details == {"status": "INVALID_CREDENTIALS"}
        assert authenticator.state is AuthState.FAILED
        assert fake_bank.requests_to("/redirect") == []

    @pytest.mark.asyncio
    async def test_unknown_status_is_rejected(self, authenticator, credentials, fake_bank):
        fake_bank.login_status = "ACCOUNT_LOCKED"

        with pytest.raises(BankAuthenticationError):
            await authenticator.submit_credentials(credentials)

        assert authenticator.state is AuthState.FAILED

    @pytest.mark.asyncio
    async def test_failed_attempt_can_be_restarted(
        self,
        authenticator,
        credentials,
        fake_bank,
    ):
        fake_bank.login_status = "ACCOUNT_LOCKED"
        with pytest.raises(BankAuthenticationError):
            await authenticator.submit_credentials(credentials)

        fake_bank.login_status = "MFA_REQUIRED"
        challenge = await authenticator.submit_credentials(credentials)

        assert challenge is not None
        assert authenticator.state is AuthState.AWAITING_ONE_TIME_CODE

    @pytest.mark.asyncio
    async def test_cannot_log_in_twice(self, authenticator, credentials, fake_bank):
        fake_bank.login_status = "LOGIN_SUCCESSFUL"
        await authenticator.submit_credentials(credentials)

        with pytest.raises(InvalidAuthStepError):
            await authenticator.submit_credentials(credentials)


# ═══════════════════════════════════════════════════════════════
#                   Step 2: SMS one-time code
# ═══════════════════════════════════════════════════════════════


class TestSubmitOtp:
    @pytest.mark.asyncio
    async def test_valid_otp_authenticates_session(
        self,
        authenticator,
        credentials,
        fake_bank,
        session,
    ):
        await authenticator.submit_credentials(credentials)

        await authenticator.submit_otp(OTP)

        assert authenticator.state is AuthState.AUTHENTICATED
        assert session.authenticated
        assert session.authorization_code is None
        assert fake_bank.active_sessions == 1

    @pytest.mark.asyncio
    async def test_code_is_exchanged_through_redirect_endpoint(
        self,
        authenticator,
        credentials,
        fake_bank,
    ):
        await authenticator.submit_credentials(credentials)
        await authenticator.submit_otp(OTP)

        (redirect,) = fake_bank.requests_to("/redirect")
        assert redirect.url.params["method"] == "customerid"
        assert redirect.url.params["code"].startswith("code-")
        assert fake_bank.paths()[-3:] == ["/redirect", "/", "/gw/verifyUser"]

    @pytest.mark.asyncio
    async def test_otp_before_credentials_is_rejected(self, authenticator, fake_bank):
        with pytest.raises(InvalidAuthStepError) as exc_info:
            await authenticator.submit_otp(OTP)

        assert exc_info.value.details["state"] == "awaiting_primary_credentials"
        assert fake_bank.requests == []

    @pytest.mark.asyncio
    async def test_wrong_otp_fails_the_attempt(self, authenticator, credentials):
        await authenticator.submit_credentials(credentials)

        with pytest.raises(BankAuthenticationError):
            await authenticator.submit_otp("000000")

        assert authenticator.state is AuthState.FAILED
        with pytest.raises(InvalidAuthStepError):
            await authenticator.submit_otp(OTP)

    @pytest.mark.asyncio
    async def test_blank_otp_is_rejected_without_request(
        self,
        authenticator,
        credentials,
        fake_bank,
    ):
        await authenticator.submit_credentials(credentials)
        request_count = len(fake_bank.requests)

        with pytest.raises(ValidationError):
            await authenticator.submit_otp("   ")

        assert len(fake_bank.requests) == request_count
        assert authenticator.state is AuthState.AWAITING_ONE_TIME_CODE

    @pytest.mark.asyncio
    async def test_otp_is_stripped(self, authenticator, credentials):
        await authenticator.submit_credentials(credentials)

        await authenticator.submit_otp(f" {OTP}\n")

        assert authenticator.state is AuthState.AUTHENTICATED


# ═══════════════════════════════════════════════════════════════
#                 Session establishment check
# ═══════════════════════════════════════════════════════════════


class TestSessionEstablishment:
    @pytest.mark.asyncio
    async def test_is_logged_in_false_fails(self, authenticator, credentials, fake_bank):
        fake_bank.verify_payload = {"isLoggedIn": False}
        await authenticator.submit_credentials(credentials)

        with pytest.raises(BankSessionEstablishmentError) as exc_info:
            await authenticator.submit_otp(OTP)

        assert exc_info.value.message == "Session could not be established."
        assert exc_info.value.code is ErrorCode.BANK_SESSION_NOT_ESTABLISHED
        assert authenticator.state is AuthState.FAILED

    @pytest.mark.asyncio
    async def test_missing_is_logged_in_fails(self, authenticator, credentials, fake_bank):
        fake_bank.verify_payload = {"username": "Max"}
        await authenticator.submit_credentials(credentials)

        with pytest.raises(BankSessionEstablishmentError):
            await authenticator.submit_otp(OTP)

    @pytest.mark.asyncio
    async def test_success_without_code_still_verifies(
        self,
        authenticator,
        credentials,
        fake_bank,
    ):
        fake_bank.include_authorization_code = False
        await authenticator.submit_credentials(credentials)

        with pytest.raises(BankSessionEstablishmentError):
            await authenticator.submit_otp(OTP)

        assert fake_bank.requests_to("/redirect") == []
        assert len(fake_bank.requests_to("/gw/verifyUser")) == 1

    @pytest.mark.asyncio
    async def test_exchange_without_portal_visit_yields_no_session(
        self,
        session,
        fake_bank,
    ):
        exchange = AuthorizationCodeExchange(session)

        await exchange.exchange(fake_bank.issue_code())

        assert await exchange.verify() is False
        assert fake_bank.active_sessions == 0

    @pytest.mark.asyncio
    async def test_exchange_after_portal_visit_yields_session(self, session, fake_bank):
        exchange = AuthorizationCodeExchange(session)
        await session.navigate(session.banking_url("/"))

        await exchange.exchange(fake_bank.issue_code())

        assert await exchange.verify() is True

    @pytest.mark.asyncio
    async def test_transport_failure_during_exchange_is_not_retried(
        self,
        credentials,
        fake_bank,
        settings,
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/redirect":
                fake_bank.requests.append(request)
                raise httpx.ConnectError("connection reset", request=request)
            return fake_bank.handle(request)

        session = BankSession.from_settings(
            settings,
            transport=httpx.MockTransport(handler),
        )
        authenticator = SessionAuthenticator(session)
        await authenticator.submit_credentials(credentials)

        with pytest.raises(BankConnectionError) as exc_info:
            await authenticator.submit_otp(OTP)

        assert exc_info.value.code is ErrorCode.BANK_CONNECTION_FAILED
        assert authenticator.state is AuthState.FAILED
        assert not session.authenticated
        assert len(fake_bank.requests_to("/redirect")) == 1
        assert fake_bank.requests_to("/gw/verifyUser") == []
        await session.close()
