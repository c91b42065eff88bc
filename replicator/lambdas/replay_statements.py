"""
Stream consumer that replays source ledger statements on the destination.

Wired to a single-shard Kinesis stream carrying the source ledger's journal
records. Errors never escape: a failed batch is logged and counted, and the
stream redelivers it.

Environment Variables:
    See replicator.core.config.
"""

from typing import Any, Dict, Optional

from ..core.config import ReplicatorConfig
from ..ledger.client import LedgerClient
from ..stream.dispatcher import StatementDispatcher
from ..stream.records import records_from_event
from ..stream.replayer import BatchResult, ChangeReplayer
from .clients import ledger_client
from .logging_config import ensure_logging, get_logger
from .metrics import init_metrics, push_metrics, track_batch, track_batch_duration, track_batch_failure


def replay_batch(
    event: Dict[str, Any],
    client: LedgerClient,
    group_by_transaction: bool = False,
) -> BatchResult:
    """Replay every record of a Kinesis event against the given client."""
    records = records_from_event(event)
    replayer = ChangeReplayer(StatementDispatcher(client), group_by_transaction=group_by_transaction)
    with track_batch_duration():
        result = replayer.on_batch(records)
    track_batch(result)
    return result


def on_event(event: Dict[str, Any], context: Any = None) -> None:
    """Lambda entry point. Returns nothing; failures are logged, not raised."""
    ensure_logging()
    init_metrics()
    logger = get_logger(__name__, trace_id=getattr(context, "aws_request_id", None))
    logger.info(f"Processing batch of {len(event.get('Records') or [])} record(s)")

    result: Optional[BatchResult] = None
    try:
        config = ReplicatorConfig.from_env()
        client = ledger_client(config.require_dest_ledger(), config)
        result = replay_batch(event, client, group_by_transaction=config.group_by_transaction)
    except Exception as e:
        logger.error(f"Unable to replay batch: {e}")
        track_batch_failure()
        push_metrics()
        return None

    if result.failed:
        logger.error(f"Batch cut short, awaiting redelivery: {result.error}")
    logger.info(
        f"Replayed {result.replayed} statement(s), skipped {result.read_only} read-only, "
        f"{result.failed_statements} failed"
    )
    push_metrics()
    return None
