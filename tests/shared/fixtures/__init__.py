"""Shared test fixtures."""

from tests.shared.fixtures.bigbank_server import (
    AUTH_BASE_URL,
    BANKING_BASE_URL,
    FakeBigbank,
    make_transactions,
)

__all__ = [
    "AUTH_BASE_URL",
    "BANKING_BASE_URL",
    "FakeBigbank",
    "make_transactions",
]
