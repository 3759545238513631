"""Bank account value object."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bigbank.domain.shared.iban import has_iban_shape, normalize_iban

BANK_CODE = "Bigbank"
OWNER_MAX_LENGTH = 255


class BankAccountType(str, Enum):
    """Account products offered by Bigbank Germany."""

    SAVINGS = "savings"  # Tagesgeld
    FIXED_TERM_DEPOSIT = "fixed_term_deposit"  # Festgeld

    @property
    def display_name(self) -> str:
        if self is BankAccountType.FIXED_TERM_DEPOSIT:
            return "Bigbank Festgeld"
        return "Bigbank Tagesgeld"

    @classmethod
    def from_codes(
        cls,
        agreement_type_code: str | None,
        account_type_code: str | None,
    ) -> "BankAccountType":
        """Detect the account type from the portal's product codes.

        Agreement type "TD" or an account type code containing "TERM" or
        "FD" denotes a fixed-term deposit; everything else is savings.
        """
        type_code = (account_type_code or "").upper()
        if (agreement_type_code or "").upper() == "TD":
            return cls.FIXED_TERM_DEPOSIT
        if "TERM" in type_code or "FD" in type_code:
            return cls.FIXED_TERM_DEPOSIT
        return cls.SAVINGS


class BankAccount(BaseModel):
    """
    Value object representing a Bigbank account.

    `account_id` is the portal's numeric account id (as string) and is what
    the statement endpoint expects. `iban` may be empty for accounts the
    portal returns without one; `account_number` then falls back to the id.
    """

    account_id: str = Field(..., min_length=1, description="Portal account id")
    iban: str = Field(default="", description="IBAN, may be empty")
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    account_type: BankAccountType = Field(default=BankAccountType.SAVINGS)
    owner: str = Field(
        default="",
        max_length=OWNER_MAX_LENGTH,
        description="Account holder",
    )

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    @field_validator("iban")
    @classmethod
    def validate_iban(cls, v: str) -> str:
        normalized = normalize_iban(v)
        if normalized is None:
            return ""
        if not has_iban_shape(normalized):
            msg = "IBAN must start with 2 letters and 2 digits, at most 34 characters"
            raise ValueError(msg)
        return normalized

    @property
    def account_number(self) -> str:
        return self.iban or self.account_id

    @property
    def name(self) -> str:
        return self.account_type.display_name

    @property
    def bank_code(self) -> str:
        return BANK_CODE

    def __str__(self) -> str:
        owner = f"{self.owner} - " if self.owner else ""
        return f"{self.name}: {owner}{self.account_number} ({self.currency})"
