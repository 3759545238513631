"""DTO for account refresh command result."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from bigbank.domain.banking.value_objects import BankTransaction


@dataclass(frozen=True)
class RefreshResult:
    """Balance and transactions of one account after a refresh."""

    success: bool
    refreshed_at: datetime
    account_id: str
    currency: str
    balance: Optional[Decimal] = None
    transactions: list[BankTransaction] = field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def transactions_count(self) -> int:
        return len(self.transactions)

    @property
    def pending_count(self) -> int:
        return sum(1 for tx in self.transactions if not tx.booked)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "refreshed_at": self.refreshed_at.isoformat(),
            "account_id": self.account_id,
            "currency": self.currency,
            "balance": str(self.balance) if self.balance is not None else None,
            "transactions": [tx.model_dump(mode="json") for tx in self.transactions],
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "error_message": self.error_message,
            "error_code": self.error_code,
        }
