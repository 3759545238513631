"""HTTP session shared by all parts of the Bigbank connector.

The session owns the httpx client (and therefore the cookie jar that carries
the login across the auth and banking domains) together with the login
state. It replaces the single module-level connection handle of a plain
script with an explicit object passed to every component.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

import httpx

from bigbank.domain.banking.exceptions import (
    BankConnectionError,
    BankSessionNotAuthenticatedError,
)
from bigbank_config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Accept": "application/json"}


class AuthState(str, Enum):
    """Login progress of a BankSession."""

    AWAITING_PRIMARY_CREDENTIALS = "awaiting_primary_credentials"
    AWAITING_ONE_TIME_CODE = "awaiting_one_time_code"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"
    LOGGED_OUT = "logged_out"


class BankSession:
    """Cookie-carrying HTTP session plus login state.

    Only the SessionAuthenticator (and logout) change `state`. Data
    components call `require_authenticated()` before issuing requests.
    """

    def __init__(  # NOQA: PLR0913
        self,
        auth_base_url: str,
        banking_base_url: str,
        timeout: float = 30.0,
        language: str = "de-de",
        user_agent: str = "bigbank-connector/1.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.auth_base_url = auth_base_url.rstrip("/")
        self.banking_base_url = banking_base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
            headers={
                "Accept-Language": language,
                "User-Agent": user_agent,
            },
        )
        self.state = AuthState.AWAITING_PRIMARY_CREDENTIALS
        self.authorization_code: str | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> BankSession:
        settings = settings or get_settings()
        return cls(
            auth_base_url=settings.auth_base_url,
            banking_base_url=settings.banking_base_url,
            timeout=settings.http_timeout_seconds,
            language=settings.language,
            user_agent=settings.user_agent,
            transport=transport,
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    def reset(self) -> None:
        """Forget cookies and login progress for a fresh login attempt."""
        self._client.cookies.clear()
        self.state = AuthState.AWAITING_PRIMARY_CREDENTIALS
        self.authorization_code = None

    def require_authenticated(self) -> None:
        if not self.authenticated:
            raise BankSessionNotAuthenticatedError(state=self.state.value)

    def auth_url(self, path: str) -> str:
        return f"{self.auth_base_url}{path}"

    def banking_url(self, path: str) -> str:
        return f"{self.banking_base_url}{path}"

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    async def navigate(
        self,
        url: str,
        params: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        """Browser-style GET that follows redirects and keeps the cookies."""
        return await self._send("GET", url, params=params)

    async def get_json(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
    ) -> Any | None:
        """GET a JSON resource. Returns None if the body is not JSON."""
        response = await self._send("GET", url, params=params, headers=JSON_HEADERS)
        return self._decode(response)

    async def post_json(self, url: str, body: dict[str, Any]) -> Any | None:
        """POST a JSON body. Returns None if the response body is not JSON."""
        response = await self._send("POST", url, json=body, headers=JSON_HEADERS)
        return self._decode(response)

    async def close(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        # Query strings may carry the authorization code; never log them
        safe_url = url.split("?", 1)[0]
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("%s %s timed out", method, safe_url)
            msg = "Connection to bank timed out"
            raise BankConnectionError(msg, url=safe_url) from e
        except httpx.RequestError as e:
            logger.error("%s %s failed: %s", method, safe_url, type(e).__name__)
            msg = f"Connection to bank failed: {type(e).__name__}"
            raise BankConnectionError(msg, url=safe_url) from e

        if response.is_error:
            # Error bodies are still interpreted by the caller
            logger.warning(
                "%s %s returned HTTP %d",
                method,
                response.request.url.path,
                response.status_code,
            )
        else:
            logger.debug(
                "%s %s -> %d",
                method,
                response.request.url.path,
                response.status_code,
            )
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any | None:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning(
                "Response from %s is not valid JSON",
                response.request.url.path,
            )
            return None
