"""
Change replayer: apply a batch of change records to the destination ledger.

Replay is strictly sequential. Records are processed in delivery order and
statements in block order; each replay call completes before the next one
starts, so the destination sees statements in source commit order.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..core.errors import StatementReplayError
from .decoder import ExtractedStatement, JournalBlock, decode, dump_text, extract_statements
from .dispatcher import StatementDispatcher, should_replay
from .records import ChangeRecord

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """
    Outcome of one batch.

    Fields:
        records: Records seen
        blocks: Records decoded as BLOCK_SUMMARY
        skipped_records: Records that were not replayable
        statements: Statements extracted from decoded blocks
        read_only: Statements skipped as read-only
        replayed: Statements applied to the destination
        failed_statements: Statements whose replay failed
        failed: True if the batch was cut short by a hard failure
        error: Message of the hard failure, if any
        errors: Messages of per-statement failures
    """
    records: int = 0
    blocks: int = 0
    skipped_records: int = 0
    statements: int = 0
    read_only: int = 0
    replayed: int = 0
    failed_statements: int = 0
    failed: bool = False
    error: Optional[str] = None
    errors: List[str] = field(default_factory=list)


class ChangeReplayer:
    """
    Orchestrates decode -> extract -> filter -> replay for each record.

    Per-statement failures are logged and skipped. Any other failure stops
    the batch, is logged, and is reported in the result without raising, so
    the delivery mechanism can redeliver the batch.
    """

    def __init__(self, dispatcher: StatementDispatcher, group_by_transaction: bool = False) -> None:
        """
        Args:
            dispatcher: Replays statements on the destination
            group_by_transaction: Replay a block's statements in one transaction
        """
        self.dispatcher = dispatcher
        self.group_by_transaction = group_by_transaction

    def on_batch(self, records: Iterable[ChangeRecord]) -> BatchResult:
        result = BatchResult()
        try:
            for record in records:
                result.records += 1
                self._replay_record(record, result)
        except Exception as e:
            logger.exception("Batch replay aborted: %s", e)
            result.failed = True
            result.error = str(e)

        logger.info(
            "Batch complete: %d record(s), %d replayed, %d read-only, %d failed",
            result.records,
            result.replayed,
            result.read_only,
            result.failed_statements,
        )
        return result

    def _replay_record(self, record: ChangeRecord, result: BatchResult) -> None:
        block = decode(record.data)
        if block is None:
            result.skipped_records += 1
            logger.debug(
                "Skipping non BLOCK_SUMMARY record",
                extra={"partition_key": record.partition_key, "sequence_number": record.sequence_number},
            )
            return

        result.blocks += 1
        logger.info(
            "Stream record: partition key %s, sequence number %s, transaction %s",
            record.partition_key,
            record.sequence_number,
            block.transaction_id,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Block data: %s", dump_text(block))

        statements = extract_statements(block)
        result.statements += len(statements)

        if self.group_by_transaction:
            self._replay_grouped(block, statements, result)
            return

        for stmt in statements:
            if not should_replay(stmt.text):
                logger.info("Ignore read-only statement %s", stmt.text)
                result.read_only += 1
                continue
            logger.info("The current PartiQL statement is %s", stmt.text)
            try:
                self.dispatcher.replay(stmt.text, stmt.transaction_id)
            except StatementReplayError as e:
                logger.error("%s", e)
                result.failed_statements += 1
                result.errors.append(str(e))
                continue
            result.replayed += 1

    def _replay_grouped(
        self,
        block: JournalBlock,
        statements: List[ExtractedStatement],
        result: BatchResult,
    ) -> None:
        texts = []
        for stmt in statements:
            if should_replay(stmt.text):
                texts.append(stmt.text)
            else:
                result.read_only += 1
        if not texts:
            return

        try:
            self.dispatcher.replay_group(texts, block.transaction_id)
        except StatementReplayError as e:
            logger.error("%s", e)
            result.failed_statements += len(texts)
            result.errors.append(str(e))
            return
        result.replayed += len(texts)
