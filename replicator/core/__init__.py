"""
Core primitives shared by the provisioner and the replayer.

This module provides:
- Errors: Exception taxonomy for ledger, provisioning and replay failures
- Statement: A PartiQL statement with bound parameters
- ReplicatorConfig: Environment-driven configuration
- physical_resource_id: Stable identity for provisioning results
"""

from .errors import (
    ReplicatorError,
    LedgerError,
    ConnectivityError,
    ConcurrencyExhausted,
    ProvisioningError,
    DecodeSkip,
    StatementReplayError,
    ConfigError,
)
from .statements import Statement, leading_keyword, is_read_only, READ_ONLY_KEYWORDS
from .config import ReplicatorConfig
from .ids import physical_resource_id

__all__ = [
    "ReplicatorError",
    "LedgerError",
    "ConnectivityError",
    "ConcurrencyExhausted",
    "ProvisioningError",
    "DecodeSkip",
    "StatementReplayError",
    "ConfigError",
    "Statement",
    "leading_keyword",
    "is_read_only",
    "READ_ONLY_KEYWORDS",
    "ReplicatorConfig",
    "physical_resource_id",
]
