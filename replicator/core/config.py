"""
Environment-driven configuration for the replicator entry points.

Environment Variables:
    REPLICATOR_DEST_LEDGER_NAME: Destination ledger (fallback: destQldbName)
    AWS_REGION: Region of the destination ledger (fallback: AWS_DEFAULT_REGION)
    REPLICATOR_RETRY_LIMIT: OCC retry limit per transaction - default: 4
    REPLICATOR_GROUP_BY_TRANSACTION: "1" replays a block's statements in one transaction
    REPLICATOR_LEDGER_ENDPOINT: Optional endpoint override for the session API
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError

DEFAULT_RETRY_LIMIT = 4


def _read_retry_limit() -> int:
    raw = os.getenv("REPLICATOR_RETRY_LIMIT", str(DEFAULT_RETRY_LIMIT))
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"REPLICATOR_RETRY_LIMIT must be an integer, got {raw!r}") from e
    if value < 0:
        raise ConfigError(f"REPLICATOR_RETRY_LIMIT must be >= 0, got {value}")
    return value


@dataclass
class ReplicatorConfig:
    dest_ledger_name: Optional[str]
    region: Optional[str]
    retry_limit: int = DEFAULT_RETRY_LIMIT
    group_by_transaction: bool = False
    endpoint_url: Optional[str] = None

    @staticmethod
    def from_env() -> "ReplicatorConfig":
        dest_ledger_name = os.getenv("REPLICATOR_DEST_LEDGER_NAME") or os.getenv("destQldbName")
        region = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
        group_by_transaction = os.getenv("REPLICATOR_GROUP_BY_TRANSACTION", "0") == "1"
        endpoint_url = os.getenv("REPLICATOR_LEDGER_ENDPOINT") or None
        return ReplicatorConfig(
            dest_ledger_name=dest_ledger_name,
            region=region,
            retry_limit=_read_retry_limit(),
            group_by_transaction=group_by_transaction,
            endpoint_url=endpoint_url,
        )

    def require_dest_ledger(self) -> str:
        if not self.dest_ledger_name:
            raise ConfigError(
                "Destination ledger not configured (set REPLICATOR_DEST_LEDGER_NAME)"
            )
        return self.dest_ledger_name
