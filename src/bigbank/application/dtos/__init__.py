"""Data transfer objects returned by application commands."""

from bigbank.application.dtos.banking import (
    AccountInfo,
    ConnectionResult,
    RefreshResult,
)

__all__ = [
    "AccountInfo",
    "ConnectionResult",
    "RefreshResult",
]
