"""Bank transaction value object."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class BankTransaction(BaseModel):
    """Value object representing a transaction as reported by the bank.

    Dates are optional because the statement API is not guaranteed to
    deliver a parseable date, and rows are never dropped for that reason.
    """

    booking_date: date | None = Field(default=None, description="When booked")
    value_date: date | None = Field(default=None, description="When money moved")
    amount: Decimal = Field(..., description="Signed amount, negative = debit")
    currency: str = Field(..., min_length=3, max_length=3)
    name: str = Field(default="", max_length=255, description="Counterparty")
    purpose: str = Field(default="", description="Transaction description")
    booked: bool = Field(default=True, description="False for pending entries")

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str:
        return str(value)

    @field_serializer("booking_date", "value_date")
    def serialize_date(self, value: date | None) -> str | None:
        return value.isoformat() if value else None

    def is_credit(self) -> bool:
        return self.amount > 0

    def is_debit(self) -> bool:
        return self.amount < 0

    def __str__(self) -> str:
        direction = "+" if self.is_credit() else ""
        booked_on = self.booking_date.isoformat() if self.booking_date else "????-??-??"
        pending = "" if self.booked else " (pending)"
        return (
            f"{booked_on}: {direction}{self.amount} {self.currency} "
            f"- {self.purpose[:50]}{pending}"
        )
