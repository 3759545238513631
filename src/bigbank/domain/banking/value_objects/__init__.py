"""Value objects for banking domain."""

from bigbank.domain.banking.value_objects.account_snapshot import AccountSnapshot
from bigbank.domain.banking.value_objects.auth_challenge import AuthChallenge
from bigbank.domain.banking.value_objects.bank_account import (
    BankAccount,
    BankAccountType,
)
from bigbank.domain.banking.value_objects.bank_credentials import BankCredentials
from bigbank.domain.banking.value_objects.bank_transaction import BankTransaction

__all__ = [
    "AccountSnapshot",
    "AuthChallenge",
    "BankAccount",
    "BankAccountType",
    "BankCredentials",
    "BankTransaction",
]
