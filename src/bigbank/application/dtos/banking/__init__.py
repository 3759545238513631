"""Banking DTOs. Data transfer objects for connection and refresh results."""

from bigbank.application.dtos.banking.connection_result import (
    AccountInfo,
    ConnectionResult,
)
from bigbank.application.dtos.banking.refresh_result import RefreshResult

__all__ = [
    "AccountInfo",
    "ConnectionResult",
    "RefreshResult",
]
