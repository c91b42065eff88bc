"""
Destination ledger access.

This module provides:
- LedgerClient: Abstract interface for transactional ledger access
- QldbLedgerClient: Amazon QLDB access through pyqldb
- InMemoryLedgerClient: In-process ledger for tests and dry runs
"""

from .client import LedgerClient
from .memory_client import InMemoryLedgerClient
from .qldb_client import QldbLedgerClient

__all__ = [
    "LedgerClient",
    "InMemoryLedgerClient",
    "QldbLedgerClient",
]
