"""Bigbank connector.

Logs in to the Bigbank self-service portal (customer ID + password, then
SMS mTAN) and retrieves balances and transactions for Tagesgeld and
Festgeld accounts.
"""

__version__ = "1.0.0"
