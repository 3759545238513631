"""Banking domain package.

This package contains the domain model for the Bigbank connection:
credentials, the mTAN challenge, accounts, balances and transactions.
"""
