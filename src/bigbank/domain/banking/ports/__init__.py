"""Port interfaces for banking operations.

These interfaces define what the domain needs from the bank's online
services. Implementations (adapters) are provided in the infrastructure layer.
"""

from bigbank.domain.banking.ports.bank_connection_port import BankConnectionPort

__all__ = [
    "BankConnectionPort",
]
