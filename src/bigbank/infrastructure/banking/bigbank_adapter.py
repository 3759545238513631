"""Bigbank adapter - Anti-Corruption Layer for the Bigbank web API.

This adapter implements the BankConnectionPort on top of the portal's JSON
endpoints. It wires one BankSession into the authenticator and the data
components and translates the portal's payloads into our domain model.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import httpx

from bigbank.domain.banking.exceptions import BankConnectionError
from bigbank.domain.banking.ports.bank_connection_port import BankConnectionPort
from bigbank.domain.banking.value_objects import (
    AccountSnapshot,
    AuthChallenge,
    BankAccount,
    BankCredentials,
    BankTransaction,
)
from bigbank.infrastructure.banking.account_directory import AccountDirectory
from bigbank.infrastructure.banking.balance_resolver import BalanceResolver
from bigbank.infrastructure.banking.bank_session import AuthState, BankSession
from bigbank.infrastructure.banking.session_authenticator import (
    SessionAuthenticator,
)
from bigbank.infrastructure.banking.transaction_paginator import (
    TransactionPaginator,
)
from bigbank_config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

LOGOUT_PATH = "/gw/logout"


class BigbankAdapter(BankConnectionPort):
    """
    Bigbank Adapter - Anti-Corruption Layer.

    Responsibilities:
    1. Implement BankConnectionPort interface
    2. Own the BankSession for exactly one login
    3. Refuse data access until the login has completed
    4. End the portal session on disconnect
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._session = BankSession.from_settings(self._settings, transport=transport)
        self._authenticator = SessionAuthenticator(self._session)
        self._directory = AccountDirectory(
            self._session,
            default_currency=self._settings.default_currency,
        )
        self._balances = BalanceResolver(self._session)
        self._paginator = TransactionPaginator.from_settings(
            self._session,
            self._settings,
        )

    @property
    def session(self) -> BankSession:
        return self._session

    async def login(self, credentials: BankCredentials) -> Optional[AuthChallenge]:
        return await self._authenticator.submit_credentials(credentials)

    async def submit_tan(self, tan: str) -> None:
        await self._authenticator.submit_otp(tan)

    async def fetch_accounts(self) -> list[BankAccount]:
        return await self._directory.list_accounts()

    async def fetch_balance(self, account: BankAccount) -> Optional[Decimal]:
        return await self._balances.resolve(account.account_id, account.iban)

    async def fetch_transactions(
        self,
        account: BankAccount,
        since: date | datetime,
    ) -> list[BankTransaction]:
        return await self._paginator.fetch(
            account.account_id,
            since,
            account_currency=account.currency,
        )

    async def refresh_account(
        self,
        account: BankAccount,
        since: date | datetime,
    ) -> AccountSnapshot:
        balance = await self.fetch_balance(account)
        period = self._paginator.period_for(since)
        logger.info(
            "Getting transactions since %s...",
            period.start_date.strftime("%d.%m.%Y"),
        )
        transactions = await self._paginator.fetch_period(
            account.account_id,
            period,
            account_currency=account.currency,
        )
        return AccountSnapshot(
            account_id=account.account_id,
            balance=balance,
            transactions=tuple(transactions),
            start_date=period.start_date,
            end_date=period.end_date,
        )

    async def disconnect(self) -> None:
        """Log out from the portal and close the HTTP session."""
        if self._session.is_closed:
            return
        try:
            if self._session.authenticated:
                logger.info("Logging out from bank")
                await self._session.get_json(self._session.banking_url(LOGOUT_PATH))
        except BankConnectionError as e:
            logger.warning("Logout failed: %s", e)
        finally:
            self._session.state = AuthState.LOGGED_OUT
            await self._session.close()

    def is_connected(self) -> bool:
        return self._session.authenticated and not self._session.is_closed
