"""List the customer's accounts."""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError

from bigbank.domain.banking.value_objects import BankAccount, BankAccountType
from bigbank.domain.banking.value_objects.bank_account import OWNER_MAX_LENGTH
from bigbank.domain.shared.iban import has_iban_shape
from bigbank.infrastructure.banking.balance_resolver import ACCOUNTS_PATH
from bigbank.infrastructure.banking.bank_session import BankSession
from bigbank.infrastructure.banking.session_authenticator import VERIFY_USER_PATH
from bigbank.infrastructure.banking.transaction_normalizer import parse_currency

logger = logging.getLogger(__name__)


class AccountDirectory:
    """Map the portal's account list to BankAccount value objects.

    The owner name is looked up once per directory and reused for every
    listing afterwards.
    """

    def __init__(self, session: BankSession, default_currency: str = "EUR"):
        self._session = session
        self._default_currency = default_currency
        self._owner_name: Optional[str] = None

    @property
    def owner_name(self) -> Optional[str]:
        return self._owner_name

    async def list_accounts(self) -> list[BankAccount]:
        self._session.require_authenticated()

        if not self._owner_name:
            self._owner_name = await self._fetch_owner_name()

        entries = await self._session.get_json(self._session.banking_url(ACCOUNTS_PATH))
        if not isinstance(entries, list):
            logger.warning("Account list is missing or malformed")
            return []

        accounts = []
        for entry in entries:
            account = self._map_account(entry)
            if account is not None:
                accounts.append(account)

        logger.info("Found %d accounts", len(accounts))
        return accounts

    async def _fetch_owner_name(self) -> str:
        result = await self._session.post_json(
            self._session.banking_url(VERIFY_USER_PATH),
            {},
        )
        if isinstance(result, dict) and result.get("username"):
            return str(result["username"]).strip()[:OWNER_MAX_LENGTH]
        logger.debug("Owner name not available")
        return ""

    def _map_account(self, entry: Any) -> Optional[BankAccount]:
        if not isinstance(entry, dict) or entry.get("id") is None:
            logger.warning("Skipping account entry without id")
            return None

        account_id = str(entry["id"])
        iban = str(entry.get("iban") or "")
        if iban and not has_iban_shape(iban):
            logger.warning("Account %s has an unexpected IBAN, ignoring it", account_id)
            iban = ""

        try:
            return BankAccount(
                account_id=account_id,
                iban=iban,
                currency=(
                    parse_currency(entry.get("currencyCode")) or self._default_currency
                ),
                account_type=BankAccountType.from_codes(
                    entry.get("agreementTypeCode"),
                    entry.get("accountTypeCode"),
                ),
                owner=self._owner_name or "",
            )
        except ValidationError as e:
            logger.warning("Skipping account %s: %s", entry.get("id"), e)
            return None
