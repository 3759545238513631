"""Log in to the bank (with mTAN if required) and list the accounts."""

from __future__ import annotations

import inspect
import logging
from functools import wraps
from typing import Awaitable, Callable, Optional

from bigbank.application.dtos.banking import AccountInfo, ConnectionResult
from bigbank.domain.banking.exceptions import TanRequiredError
from bigbank.domain.banking.ports import BankConnectionPort
from bigbank.domain.banking.value_objects import (
    AuthChallenge,
    BankAccount,
    BankCredentials,
)
from bigbank.domain.shared.exceptions import DomainException
from bigbank.domain.shared.time import utc_now
from bigbank.infrastructure.banking.bigbank_adapter import BigbankAdapter
from bigbank_config.settings import Settings

logger = logging.getLogger(__name__)

TanCallback = Callable[[AuthChallenge], str | Awaitable[str]]


class BankConnectionCommand:
    """Coordinate the login conversation and the account listing.

    The adapter stays logged in after a successful execution so that the
    accounts can be refreshed; the caller is responsible for disconnecting.
    """

    def __init__(self, bank_adapter: BankConnectionPort):
        self._adapter = bank_adapter

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> BankConnectionCommand:
        return cls(bank_adapter=BigbankAdapter(settings))

    @property
    def adapter(self) -> BankConnectionPort:
        return self._adapter

    async def execute(
        self,
        credentials: BankCredentials,
        tan_callback: Optional[TanCallback] = None,
    ) -> ConnectionResult:
        try:
            challenge = await self._adapter.login(credentials)
            if challenge is not None:
                if tan_callback is None:
                    raise TanRequiredError()
                tan = await self._wrap_tan_callback(tan_callback)(challenge)
                await self._adapter.submit_tan(tan)

            connected_at = utc_now()
            accounts = await self._adapter.fetch_accounts()

        except DomainException as e:
            logger.error("Bank connection failed: %s", e.message)
            if self._adapter.is_connected():
                await self._adapter.disconnect()
            return ConnectionResult(
                success=False,
                connected_at=utc_now(),
                accounts=[],
                error_message=e.message,
                error_code=e.code.value,
            )

        return ConnectionResult(
            success=True,
            connected_at=connected_at,
            accounts=[self._to_account_info(account) for account in accounts],
            warning_message=None if accounts else "No accounts found at bank",
        )

    @staticmethod
    def _to_account_info(account: BankAccount) -> AccountInfo:
        return AccountInfo(
            account_id=account.account_id,
            iban=account.iban,
            account_number=account.account_number,
            account_name=account.name,
            account_type=account.account_type.value,
            owner=account.owner,
            currency=account.currency,
        )

    @staticmethod
    def _wrap_tan_callback(
        callback: TanCallback,
    ) -> Callable[[AuthChallenge], Awaitable[str]]:
        @wraps(callback)
        async def _async_callback(challenge: AuthChallenge) -> str:
            result = callback(challenge)
            if inspect.isawaitable(result):
                return await result  # type: ignore[func-returns-value]
            return result  # type: ignore[return-value,arg-type]

        return _async_callback
