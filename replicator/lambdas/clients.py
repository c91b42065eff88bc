"""
Shared destination ledger clients.

One client per ledger name per process, built on first use and reused by
warm invocations. Only the client is shared; table state is always re-read.
"""

from ..core.config import ReplicatorConfig
from ..ledger.client import LedgerClient
from ..ledger.qldb_client import QldbLedgerClient
from ..provision.registry import registry


def ledger_client_key(ledger_name: str) -> str:
    return f"ledger:{ledger_name}"


def ledger_client(ledger_name: str, config: ReplicatorConfig) -> LedgerClient:
    """Get or create the client for a destination ledger."""
    return registry.get_or_create(
        ledger_client_key(ledger_name),
        lambda: QldbLedgerClient(
            ledger_name,
            region=config.region,
            retry_limit=config.retry_limit,
            endpoint_url=config.endpoint_url,
        ),
    )
