"""Fetch account statements page by page.

Pages are requested strictly one after another because only the previous
page tells whether another one exists. The loop ends on a short page, on
reaching the reported total page count, on a malformed page, or after
`max_pages` requests as a guard against inconsistent page counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo

from bigbank.domain.banking.value_objects import BankTransaction
from bigbank.domain.shared.time import today_in, years_before
from bigbank.infrastructure.banking.bank_session import BankSession
from bigbank.infrastructure.banking.transaction_normalizer import (
    TransactionNormalizer,
)
from bigbank_config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

STATEMENT_PATH = "/account/api/account-statement"


@dataclass(frozen=True)
class StatementPeriod:
    start_date: date
    end_date: date


@dataclass
class PageCursor:
    page_number: int
    page_size: int
    total_pages: int = 0


class TransactionPaginator:
    """Retrieve and normalize all statement entries for a period."""

    def __init__(  # NOQA: PLR0913
        self,
        session: BankSession,
        normalizer: TransactionNormalizer,
        history_years: int = 3,
        page_size: int = 100,
        max_pages: int = 500,
        tz: Optional[tzinfo] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self._session = session
        self._normalizer = normalizer
        self._history_years = history_years
        self._page_size = page_size
        self._max_pages = max_pages
        self._tz = tz or ZoneInfo("Europe/Berlin")
        self._today = today or (lambda: today_in(self._tz))

    @classmethod
    def from_settings(
        cls,
        session: BankSession,
        settings: Optional[Settings] = None,
    ) -> TransactionPaginator:
        settings = settings or get_settings()
        return cls(
            session=session,
            normalizer=TransactionNormalizer.from_settings(settings),
            history_years=settings.history_years,
            page_size=settings.statement_page_size,
            max_pages=settings.statement_max_pages,
            tz=settings.tzinfo,
        )

    def period_for(self, since: date | datetime) -> StatementPeriod:
        """Statement period from `since` until today.

        The start is never earlier than `history_years` before today, and
        never later than today.
        """
        end_date = self._today()
        if isinstance(since, datetime):
            since = since.astimezone(self._tz).date() if since.tzinfo else since.date()
        earliest = years_before(end_date, self._history_years)
        start_date = min(max(since, earliest), end_date)
        return StatementPeriod(start_date=start_date, end_date=end_date)

    async def fetch(
        self,
        account_id: str,
        since: date | datetime,
        account_currency: Optional[str] = None,
    ) -> list[BankTransaction]:
        self._session.require_authenticated()

        period = self.period_for(since)
        logger.info(
            "Getting transactions since %s...",
            period.start_date.strftime("%d.%m.%Y"),
        )
        return await self.fetch_period(account_id, period, account_currency)

    async def fetch_period(
        self,
        account_id: str,
        period: StatementPeriod,
        account_currency: Optional[str] = None,
    ) -> list[BankTransaction]:
        self._session.require_authenticated()

        cursor = PageCursor(page_number=1, page_size=self._page_size)
        transactions: list[BankTransaction] = []

        while True:
            page = await self._session.get_json(
                self._session.banking_url(STATEMENT_PATH),
                params={
                    "accountId": account_id,
                    "startDate": period.start_date.isoformat(),
                    "endDate": period.end_date.isoformat(),
                    "pageSize": cursor.page_size,
                    "pageNumber": cursor.page_number,
                },
            )

            items = page.get("transactions") if isinstance(page, dict) else None
            if not isinstance(items, list):
                logger.warning(
                    "Statement page %d has no transaction list, stopping",
                    cursor.page_number,
                )
                break

            transactions.extend(self._normalizer.normalize_all(items, account_currency))
            cursor.total_pages = _total_pages(page)
            logger.debug(
                "Statement page %d/%d: %d entries",
                cursor.page_number,
                cursor.total_pages,
                len(items),
            )

            if len(items) < cursor.page_size:
                break
            if cursor.page_number >= cursor.total_pages:
                break
            if cursor.page_number >= self._max_pages:
                logger.warning(
                    "Stopped after %d statement pages although %d were reported",
                    cursor.page_number,
                    cursor.total_pages,
                )
                break
            cursor.page_number += 1

        logger.info(
            "Fetched %d transactions for account %s",
            len(transactions),
            account_id,
        )
        return transactions


def _total_pages(page: dict[str, Any]) -> int:
    pagination = page.get("pagination") or page.get("page") or {}
    if not isinstance(pagination, dict):
        return 0
    value = pagination.get("totalPages")
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0
