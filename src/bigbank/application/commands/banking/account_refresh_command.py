"""Refresh balance and transactions of a single account."""

from __future__ import annotations

import logging
from datetime import date, datetime

from bigbank.application.dtos.banking import AccountInfo, RefreshResult
from bigbank.domain.banking.ports import BankConnectionPort
from bigbank.domain.banking.value_objects import BankAccount, BankAccountType
from bigbank.domain.shared.exceptions import DomainException
from bigbank.domain.shared.time import utc_now

logger = logging.getLogger(__name__)


class AccountRefreshCommand:
    """Fetch the current balance and the transactions since a given date.

    Requires an adapter that is already logged in. A missing balance is not
    an error: the result then carries `balance=None` and the transactions.
    """

    def __init__(self, bank_adapter: BankConnectionPort):
        self._adapter = bank_adapter

    async def execute(
        self,
        account: BankAccount | AccountInfo,
        since: date | datetime,
    ) -> RefreshResult:
        bank_account = self._to_bank_account(account)
        refreshed_at = utc_now()

        try:
            snapshot = await self._adapter.refresh_account(bank_account, since)
        except DomainException as e:
            logger.error(
                "Refresh of account %s failed: %s",
                bank_account.account_id,
                e.message,
            )
            return RefreshResult(
                success=False,
                refreshed_at=refreshed_at,
                account_id=bank_account.account_id,
                currency=bank_account.currency,
                error_message=e.message,
                error_code=e.code.value,
            )

        return RefreshResult(
            success=True,
            refreshed_at=refreshed_at,
            account_id=bank_account.account_id,
            currency=bank_account.currency,
            balance=snapshot.balance,
            transactions=list(snapshot.transactions),
            start_date=snapshot.start_date,
            end_date=snapshot.end_date,
        )

    @staticmethod
    def _to_bank_account(account: BankAccount | AccountInfo) -> BankAccount:
        if isinstance(account, BankAccount):
            return account
        return BankAccount(
            account_id=account.account_id,
            iban=account.iban,
            currency=account.currency,
            account_type=BankAccountType(account.account_type),
            owner=account.owner,
        )
