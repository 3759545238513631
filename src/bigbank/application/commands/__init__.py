"""Application commands."""

from bigbank.application.commands.banking import (
    AccountRefreshCommand,
    BankConnectionCommand,
    TanCallback,
)

__all__ = [
    "AccountRefreshCommand",
    "BankConnectionCommand",
    "TanCallback",
]
