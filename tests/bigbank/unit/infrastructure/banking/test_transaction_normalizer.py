"""Unit tests for statement entry normalization."""

import logging
from datetime import date
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from bigbank.infrastructure.banking import FieldRule, TransactionNormalizer
from bigbank.infrastructure.banking.transaction_normalizer import (
    parse_amount,
    parse_currency,
    parse_date,
    parse_text,
    parse_timestamp,
)

BERLIN = ZoneInfo("Europe/Berlin")


@pytest.fixture
def normalizer() -> TransactionNormalizer:
    return TransactionNormalizer(default_currency="EUR", tz=BERLIN)


# ═══════════════════════════════════════════════════════════════
#                           Parsers
# ═══════════════════════════════════════════════════════════════


class TestParsers:
    def test_parse_date(self):
        assert parse_date("2024-05-10") == date(2024, 5, 10)
        assert parse_date("2024-05-10T08:15:00Z") == date(2024, 5, 10)
        assert parse_date("2024-5-3") == date(2024, 5, 3)

    @pytest.mark.parametrize("value", ["2024-13-01", "10.05.2024", "", 20240510])
    def test_parse_date_rejects(self, value):
        assert parse_date(value) is None

    def test_parse_timestamp_milliseconds(self):
        # 2023-11-14 22:13:20 UTC is 23:13 in Berlin
        assert parse_timestamp(1700000000000, BERLIN) == date(2023, 11, 14)

    def test_parse_timestamp_seconds_as_string(self):
        assert parse_timestamp("1700000000", BERLIN) == date(2023, 11, 14)

    def test_parse_timestamp_uses_local_day(self):
        # 2024-05-01 22:30 UTC is already 2 May in Berlin
        assert parse_timestamp(1714602600000, BERLIN) == date(2024, 5, 2)

    def test_parse_timestamp_rejects(self):
        assert parse_timestamp(True, BERLIN) is None
        assert parse_timestamp("yesterday", BERLIN) is None

    def test_parse_amount(self):
        assert parse_amount("-12.34") == Decimal("-12.34")
        assert parse_amount(5) == Decimal("5")
        assert parse_amount(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", True, None, []])
    def test_parse_amount_rejects(self, value):
        assert parse_amount(value) is None

    def test_parse_text(self):
        assert parse_text("  Zinsen ") == "Zinsen"
        assert parse_text("   ") is None
        assert parse_text(42) == "42"

    def test_parse_currency(self):
        assert parse_currency("eur") == "EUR"
        assert parse_currency("EURO") is None
        assert parse_currency("€") is None


class TestFieldRule:
    def test_first_present_alias_wins(self):
        rule = FieldRule(("amount", "sum"), parse_amount)

        assert rule.resolve({"amount": "1", "sum": "2"}) == Decimal("1")
        assert rule.resolve({"sum": "2"}) == Decimal("2")

    def test_empty_and_unparsable_values_fall_through(self):
        rule = FieldRule(("amount", "sum"), parse_amount)

        assert rule.resolve({"amount": "", "sum": "2"}) == Decimal("2")
        assert rule.resolve({"amount": "n/a", "sum": "3"}) == Decimal("3")
        assert rule.resolve({"other": "1"}) is None


# ═══════════════════════════════════════════════════════════════
#                         Normalizer
# ═══════════════════════════════════════════════════════════════


class TestTransactionNormalizer:
    def test_canonical_fields(self, normalizer):
        tx = normalizer.normalize(
            {
                "bookingDate": "2024-05-10",
                "valueDate": "2024-05-11",
                "amount": "-25.00",
                "currencyCode": "EUR",
                "counterpartyName": "Max Mustermann",
                "description": "Auszahlung",
                "booked": True,
            },
        )

        assert tx.booking_date == date(2024, 5, 10)
        assert tx.value_date == date(2024, 5, 11)
        assert tx.amount == Decimal("-25.00")
        assert tx.currency == "EUR"
        assert tx.name == "Max Mustermann"
        assert tx.purpose == "Auszahlung"
        assert tx.booked is True
        assert tx.is_debit()

    def test_alias_fields(self, normalizer):
        tx = normalizer.normalize(
            {
                "date": "2024-05-10",
                "sum": 12.5,
                "senderName": "Bigbank AS",
                "transactionType": "INTEREST",
            },
        )

        assert tx.booking_date == date(2024, 5, 10)
        assert tx.value_date == date(2024, 5, 10)
        assert tx.amount == Decimal("12.5")
        assert tx.name == "Bigbank AS"
        assert tx.purpose == "INTEREST"

    def test_timestamp_booking_date(self, normalizer):
        tx = normalizer.normalize({"timestamp": 1700000000000, "amount": 1})

        assert tx.booking_date == date(2023, 11, 14)

    def test_date_string_preferred_over_timestamp(self, normalizer):
        tx = normalizer.normalize(
            {"bookingTimestamp": 1700000000000, "transactionDate": "2024-01-02"},
        )

        assert tx.booking_date == date(2024, 1, 2)

    def test_missing_amount_becomes_zero(self, normalizer, caplog):
        with caplog.at_level(logging.WARNING):
            tx = normalizer.normalize({"bookingDate": "2024-05-10"})

        assert tx.amount == Decimal("0")
        assert "has no amount" in caplog.text

    def test_missing_fields_keep_row(self, normalizer):
        tx = normalizer.normalize({})

        assert tx.booking_date is None
        assert tx.value_date is None
        assert tx.name == ""
        assert tx.purpose == ""
        assert tx.currency == "EUR"

    @pytest.mark.parametrize(
        ("raw", "account_currency", "expected"),
        [
            ({"currency": "usd"}, "CHF", "USD"),
            ({}, "CHF", "CHF"),
            ({}, None, "EUR"),
            ({"currencyCode": "??"}, "E1", "EUR"),
        ],
    )
    def test_currency_resolution(self, normalizer, raw, account_currency, expected):
        assert normalizer.normalize(raw, account_currency).currency == expected

    def test_name_is_truncated(self, normalizer):
        tx = normalizer.normalize({"name": "x" * 300})

        assert len(tx.name) == 255

    def test_booked_flag(self, normalizer):
        assert normalizer.normalize({"booked": False}).booked is False
        assert normalizer.normalize({"booked": None}).booked is True
        assert normalizer.normalize({}).booked is True

    def test_normalize_all_skips_non_mappings(self, normalizer):
        transactions = normalizer.normalize_all([{"amount": 1}, "garbage", None])

        assert [tx.amount for tx in transactions] == [Decimal("1")]
