"""Account snapshot value object."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from bigbank.domain.banking.value_objects.bank_transaction import BankTransaction


class AccountSnapshot(BaseModel):
    """Result of one account refresh.

    `balance` is None when no source reported one; callers must show it as
    unknown rather than zero.
    """

    account_id: str = Field(..., min_length=1)
    balance: Decimal | None = Field(default=None)
    transactions: tuple[BankTransaction, ...] = Field(default=())
    start_date: date
    end_date: date

    model_config = ConfigDict(frozen=True)

    @field_serializer("balance")
    def serialize_balance(self, value: Decimal | None) -> str | None:
        return str(value) if value is not None else None

    @property
    def has_balance(self) -> bool:
        return self.balance is not None
