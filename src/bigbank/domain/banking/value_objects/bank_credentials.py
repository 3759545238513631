"""Bank credentials value object."""

import os

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

CUSTOMER_ID_ENV = "BIGBANK_CUSTOMER_ID"
PASSWORD_ENV = "BIGBANK_PASSWORD"


class BankCredentials(BaseModel):
    """
    Value object representing the primary login credentials.

    Bigbank logs in with:
    - Customer ID (Kundennummer)
    - Password

    The SMS mTAN is entered separately in the second step and is not part
    of this object. Both values are SecretStr, so they never show up in
    repr, logs or serialized output; use `get_secret_value()` to send them.
    """

    customer_id: SecretStr = Field(..., description="Customer ID")
    password: SecretStr = Field(..., description="Portal password")

    model_config = ConfigDict(frozen=True)

    @field_validator("customer_id", "password")
    @classmethod
    def validate_not_empty(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            msg = "Customer ID and password must not be empty"
            raise ValueError(msg)
        return v

    @field_validator("customer_id")
    @classmethod
    def validate_customer_id(cls, v: SecretStr) -> SecretStr:
        value = v.get_secret_value()
        if value != value.strip():
            msg = "Customer ID must not contain surrounding whitespace"
            raise ValueError(msg)
        return v

    def __str__(self) -> str:
        return "BankCredentials(*****)"

    @classmethod
    def from_plain(cls, customer_id: str, password: str) -> "BankCredentials":
        """Create BankCredentials from plain strings."""
        return cls(customer_id=SecretStr(customer_id), password=SecretStr(password))

    @classmethod
    def from_env(cls) -> "BankCredentials":
        """Create BankCredentials from BIGBANK_CUSTOMER_ID / BIGBANK_PASSWORD."""
        missing = [
            name for name in (CUSTOMER_ID_ENV, PASSWORD_ENV) if not os.getenv(name)
        ]
        if missing:
            msg = f"Environment variable(s) not set: {', '.join(missing)}"
            raise ValueError(msg)
        return cls.from_plain(os.environ[CUSTOMER_ID_ENV], os.environ[PASSWORD_ENV])
