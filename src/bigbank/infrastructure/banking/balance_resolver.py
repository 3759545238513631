"""Resolve the current balance of an account.

The account list carries the live `availableBalance` and is the preferred
source. If the account is not in the list (or the list is unusable), the
deposit summary is consulted and its first entry's `amount` is used.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional

from bigbank.domain.shared.iban import ibans_match
from bigbank.infrastructure.banking.bank_session import BankSession
from bigbank.infrastructure.banking.transaction_normalizer import parse_amount

logger = logging.getLogger(__name__)

ACCOUNTS_PATH = "/account/api/accounts"
DEPOSIT_SUMMARY_PATH = "/deposit/api/dashboard/deposit-summary"


class BalanceResolver:
    """Look up balances. Nothing is cached; every call hits the bank."""

    def __init__(self, session: BankSession):
        self._session = session

    async def resolve(self, account_id: str, iban: str = "") -> Optional[Decimal]:
        """Return the balance, or None when no source reports one."""
        self._session.require_authenticated()

        balance = await self._from_account_list(account_id, iban)
        if balance is not None:
            logger.info("Balance for account %s taken from account list", account_id)
            return balance

        balance = await self._from_deposit_summary()
        if balance is not None:
            logger.info(
                "Balance for account %s taken from deposit summary",
                account_id,
            )
            return balance

        logger.warning("No balance available for account %s", account_id)
        return None

    async def _from_account_list(self, account_id: str, iban: str) -> Optional[Decimal]:
        entries = await self._session.get_json(self._session.banking_url(ACCOUNTS_PATH))
        if not isinstance(entries, list):
            logger.warning("Account list is missing or malformed")
            return None

        entry = _find_account_entry(entries, account_id, iban)
        if entry is None:
            logger.debug("Account %s not in account list", account_id)
            return None

        balance = parse_amount(entry.get("availableBalance"))
        if balance is None:
            logger.warning("Account %s has no usable availableBalance", account_id)
        return balance

    async def _from_deposit_summary(self) -> Optional[Decimal]:
        summary = await self._session.get_json(
            self._session.banking_url(DEPOSIT_SUMMARY_PATH),
        )
        if not isinstance(summary, list) or not summary:
            logger.debug("Deposit summary is empty or malformed")
            return None

        first = summary[0]
        if not isinstance(first, dict):
            return None
        return parse_amount(first.get("amount"))


def _find_account_entry(
    entries: list[Any],
    account_id: str,
    iban: str,
) -> Optional[dict[str, Any]]:
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        entry_id = entry.get("id")
        if entry_id is not None and str(entry_id) == account_id:
            return entry
        if ibans_match(entry.get("iban"), iban):
            return entry
    return None
