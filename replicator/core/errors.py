"""
Exception types for the ledger replicator.
"""

from typing import Optional


class ReplicatorError(Exception):
    """Base class for all replicator errors."""
    pass


class LedgerError(ReplicatorError):
    """Raised when a ledger transaction fails."""
    pass


class ConnectivityError(LedgerError):
    """Raised when the destination ledger is unreachable."""
    pass


class ConcurrencyExhausted(LedgerError):
    """Raised when optimistic-concurrency retries are used up."""
    pass


class ProvisioningError(ReplicatorError):
    """Raised when destination tables cannot be created."""
    pass


class DecodeSkip(ReplicatorError):
    """Raised when a change record carries nothing to replay."""
    pass


class StatementReplayError(ReplicatorError):
    """Raised when a single statement fails to replay on the destination."""

    def __init__(self, statement: str, transaction_id: Optional[str] = None, reason: str = "") -> None:
        self.statement = statement
        self.transaction_id = transaction_id
        self.reason = reason
        message = f"Failed to replay statement {statement!r}"
        if transaction_id:
            message += f" (transaction {transaction_id})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ConfigError(ReplicatorError):
    """Raised when required configuration is missing or invalid."""
    pass
