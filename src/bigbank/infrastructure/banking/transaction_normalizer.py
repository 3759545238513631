"""Map raw statement entries to BankTransaction value objects.

The statement API is not consistent across response variants: the same
value shows up under different keys. Each canonical field is therefore
resolved from an ordered list of rules; the first rule whose source field
is present and parses wins.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from decimal import Decimal, InvalidOperation
from functools import partial
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar
from zoneinfo import ZoneInfo

from bigbank.domain.banking.value_objects import BankTransaction
from bigbank_config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ISO_DATE = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})")

# Epoch values above this are milliseconds (1e12 s is in the year 33658)
_MILLISECONDS_THRESHOLD = 1e12

_MAX_NAME_LENGTH = 255


# =============================================================================
# Parsers
# =============================================================================


def parse_date(value: Any) -> date | None:
    """Parse "YYYY-MM-DD" or an ISO timestamp starting with it."""
    if not isinstance(value, str):
        return None
    match = _ISO_DATE.match(value)
    if not match:
        return None
    try:
        return date(*(int(part) for part in match.groups()))
    except ValueError:
        return None


def parse_timestamp(value: Any, tz: tzinfo) -> date | None:
    """Parse a Unix timestamp in milliseconds (or seconds) to a calendar date."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, (int, float)):
        return None
    seconds = value / 1000 if value > _MILLISECONDS_THRESHOLD else value
    try:
        return datetime.fromtimestamp(seconds, tz=tz).date()
    except (OverflowError, OSError, ValueError):
        return None


def parse_amount(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    try:
        amount = Decimal(value.strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def parse_text(value: Any) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        return None
    return value.strip() or None


def parse_currency(value: Any) -> str | None:
    text = parse_text(value)
    if text is None or len(text) != 3 or not text.isalpha():
        return None
    return text.upper()


# =============================================================================
# Resolution table
# =============================================================================


@dataclass(frozen=True)
class FieldRule(Generic[T]):
    """Source field names tried in order, with the parser applied to each."""

    aliases: tuple[str, ...]
    parse: Callable[[Any], Optional[T]]

    def resolve(self, raw: Mapping[str, Any]) -> T | None:
        for alias in self.aliases:
            value = raw.get(alias)
            if value is None or value == "":
                continue
            parsed = self.parse(value)
            if parsed is not None:
                return parsed
        return None


def resolve_first(rules: Iterable[FieldRule[T]], raw: Mapping[str, Any]) -> T | None:
    for rule in rules:
        value = rule.resolve(raw)
        if value is not None:
            return value
    return None


AMOUNT_RULES = (FieldRule(("amount", "sum"), parse_amount),)
VALUE_DATE_RULES = (FieldRule(("valueDate",), parse_date),)
PURPOSE_RULES = (
    FieldRule(("description", "purpose", "type", "transactionType"), parse_text),
)
NAME_RULES = (
    FieldRule(
        ("counterpartyName", "name", "senderName", "recipientName"),
        parse_text,
    ),
)
CURRENCY_RULES = (FieldRule(("currencyCode", "currency"), parse_currency),)


def booking_date_rules(tz: tzinfo) -> tuple[FieldRule[date], ...]:
    """Calendar date strings first, then epoch timestamps."""
    return (
        FieldRule(("bookingDate", "date", "transactionDate"), parse_date),
        FieldRule(
            ("bookingTimestamp", "timestamp"),
            partial(parse_timestamp, tz=tz),
        ),
    )


# =============================================================================
# Normalizer
# =============================================================================


class TransactionNormalizer:
    """Turn raw statement entries into BankTransaction objects.

    Rows are never dropped for missing fields: a missing amount becomes 0
    (logged), missing texts become empty strings and missing dates stay None.
    """

    def __init__(
        self,
        default_currency: str = "EUR",
        tz: Optional[tzinfo] = None,
    ):
        self._default_currency = default_currency
        self._booking_date_rules = booking_date_rules(tz or ZoneInfo("Europe/Berlin"))

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> TransactionNormalizer:
        settings = settings or get_settings()
        return cls(default_currency=settings.default_currency, tz=settings.tzinfo)

    def normalize(
        self,
        raw: Mapping[str, Any],
        account_currency: Optional[str] = None,
    ) -> BankTransaction:
        booking_date = resolve_first(self._booking_date_rules, raw)
        value_date = resolve_first(VALUE_DATE_RULES, raw) or booking_date

        amount = resolve_first(AMOUNT_RULES, raw)
        if amount is None:
            logger.warning(
                "Transaction booked %s has no amount, using 0",
                booking_date or "on unknown date",
            )
            amount = Decimal("0")

        name = resolve_first(NAME_RULES, raw) or ""
        currency = (
            resolve_first(CURRENCY_RULES, raw)
            or parse_currency(account_currency)
            or self._default_currency
        )

        return BankTransaction(
            booking_date=booking_date,
            value_date=value_date,
            amount=amount,
            currency=currency,
            name=name[:_MAX_NAME_LENGTH],
            purpose=resolve_first(PURPOSE_RULES, raw) or "",
            booked=raw.get("booked") is not False,
        )

    def normalize_all(
        self,
        items: Iterable[Any],
        account_currency: Optional[str] = None,
    ) -> list[BankTransaction]:
        transactions = []
        for item in items:
            if not isinstance(item, Mapping):
                logger.warning(
                    "Skipping statement entry of type %s",
                    type(item).__name__,
                )
                continue
            transactions.append(self.normalize(item, account_currency))
        return transactions
