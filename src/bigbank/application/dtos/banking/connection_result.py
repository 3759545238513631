"""DTO for bank connection command result."""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AccountInfo:
    """Information about an account found at the bank."""

    account_id: str
    iban: str
    account_number: str
    account_name: str
    account_type: str
    owner: str
    currency: str


@dataclass(frozen=True)
class ConnectionResult:
    """Result of bank connection command execution."""

    success: bool
    connected_at: datetime
    accounts: list[AccountInfo]
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    warning_message: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "connected_at": self.connected_at.isoformat(),
            "accounts": [asdict(acc) for acc in self.accounts],
            "error_message": self.error_message,
            "error_code": self.error_code,
            "warning_message": self.warning_message,
        }

    @property
    def accounts_count(self) -> int:
        return len(self.accounts)
