"""
Helpers shared by CLI commands.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from replicator.core.config import DEFAULT_RETRY_LIMIT
from replicator.ledger.client import LedgerClient
from replicator.ledger.qldb_client import QldbLedgerClient


def make_client(
    ledger_name: str,
    region: Optional[str] = None,
    retry_limit: int = DEFAULT_RETRY_LIMIT,
) -> LedgerClient:
    """Build a client for a real destination ledger."""
    return QldbLedgerClient(ledger_name, region=region, retry_limit=retry_limit)


def load_event(path: str) -> Dict[str, Any]:
    """
    Load a saved stream event.

    Accepts either a full event ({"Records": [...]}) or a bare list of records.
    """
    with open(Path(path), "r") as f:
        data = json.load(f)
    if isinstance(data, list):
        return {"Records": data}
    return data
