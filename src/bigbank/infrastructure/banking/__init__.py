"""Banking infrastructure adapters."""

from bigbank.infrastructure.banking.account_directory import AccountDirectory
from bigbank.infrastructure.banking.balance_resolver import BalanceResolver
from bigbank.infrastructure.banking.bank_session import AuthState, BankSession
from bigbank.infrastructure.banking.bigbank_adapter import BigbankAdapter
from bigbank.infrastructure.banking.session_authenticator import (
    AuthorizationCodeExchange,
    SessionAuthenticator,
)
from bigbank.infrastructure.banking.transaction_normalizer import (
    FieldRule,
    TransactionNormalizer,
)
from bigbank.infrastructure.banking.transaction_paginator import (
    PageCursor,
    StatementPeriod,
    TransactionPaginator,
)

__all__ = [
    "AccountDirectory",
    "AuthState",
    "AuthorizationCodeExchange",
    "BalanceResolver",
    "BankSession",
    "BigbankAdapter",
    "FieldRule",
    "PageCursor",
    "SessionAuthenticator",
    "StatementPeriod",
    "TransactionNormalizer",
    "TransactionPaginator",
]
