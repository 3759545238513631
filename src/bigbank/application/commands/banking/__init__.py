"""Banking commands - login and account refresh."""

from bigbank.application.commands.banking.account_refresh_command import (
    AccountRefreshCommand,
)
from bigbank.application.commands.banking.bank_connection_command import (
    BankConnectionCommand,
    TanCallback,
)

__all__ = [
    "AccountRefreshCommand",
    "BankConnectionCommand",
    "TanCallback",
]
