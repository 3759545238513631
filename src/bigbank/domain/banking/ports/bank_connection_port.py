"""Bank connection port interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from bigbank.domain.banking.value_objects.account_snapshot import (
        AccountSnapshot,
    )
    from bigbank.domain.banking.value_objects.auth_challenge import AuthChallenge
    from bigbank.domain.banking.value_objects.bank_account import BankAccount
    from bigbank.domain.banking.value_objects.bank_credentials import (
        BankCredentials,
    )
    from bigbank.domain.banking.value_objects.bank_transaction import (
        BankTransaction,
    )


class BankConnectionPort(ABC):
    """
    Interface for the bank connection.

    Login is a two-step conversation: `login()` either finishes the login or
    returns an AuthChallenge, in which case the code the user enters is
    passed to `submit_tan()`. All data operations require a completed login.
    """

    @abstractmethod
    async def login(self, credentials: BankCredentials) -> Optional[AuthChallenge]:
        """
        Start a login attempt with customer ID and password.

        Parameters
        ----------
        credentials
            Primary credentials

        Returns
        -------
        An AuthChallenge if an mTAN is required, None if already logged in

        Raises
        ------
        BankAuthenticationError
            If the bank rejects the credentials
        BankSessionEstablishmentError
            If the bank accepted the login but no session could be established
        BankConnectionError
            On transport failure
        """

    @abstractmethod
    async def submit_tan(self, tan: str) -> None:
        """
        Complete the login with the mTAN delivered by SMS.

        Raises
        ------
        InvalidAuthStepError
            If no mTAN is currently expected
        BankAuthenticationError
            If the bank rejects the mTAN
        BankSessionEstablishmentError
            If the authorization code exchange fails
        """

    @abstractmethod
    async def fetch_accounts(self) -> list[BankAccount]:
        """
        Fetch all accounts of the logged-in customer.

        Raises
        ------
        BankSessionNotAuthenticatedError
            If login has not completed
        """

    @abstractmethod
    async def fetch_balance(self, account: BankAccount) -> Optional[Decimal]:
        """
        Fetch the current balance of an account.

        Returns
        -------
        The balance, or None if the bank did not report one
        """

    @abstractmethod
    async def fetch_transactions(
        self,
        account: BankAccount,
        since: date | datetime,
    ) -> list[BankTransaction]:
        """
        Fetch transactions of an account since the given point in time.

        The start is capped to the supported history window; the end is today.

        Returns
        -------
        Transactions in the order returned by the bank
        """

    @abstractmethod
    async def refresh_account(
        self,
        account: BankAccount,
        since: date | datetime,
    ) -> AccountSnapshot:
        """Fetch balance and transactions of an account in one go."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Log out and release the HTTP session."""

    @abstractmethod
    def is_connected(self) -> bool:
        """
        Check if a login has completed and not been ended.

        Returns
        -------
        True if authenticated, False otherwise
        """
