"""
Journal block decoding.

Stream payloads are Ion documents. Only BLOCK_SUMMARY records carry
replayable statements, at payload.transactionInfo.statements[].statement.
Anything else (control records, revision details, heartbeats, garbage) is
a skip, never an error.
"""

import logging
from collections.abc import Mapping, Sequence as SequenceABC
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Sequence

from amazon.ion import simpleion

from ..core.errors import DecodeSkip

logger = logging.getLogger(__name__)

BLOCK_SUMMARY = "BLOCK_SUMMARY"

STATEMENTS_PATH = ("payload", "transactionInfo", "statements")


@dataclass(frozen=True)
class JournalBlock:
    """
    Decoded BLOCK_SUMMARY record.

    Fields:
        record_type: Always BLOCK_SUMMARY for decoded blocks
        document: The full Ion document
        stream_arn: ARN of the source stream, if present
        transaction_id: Source transaction that produced the block
        block_address: "<strandId>/<sequenceNo>" of the block, if present
        block_timestamp: Commit time of the block on the source, if present
    """
    record_type: str
    document: Any
    stream_arn: Optional[str] = None
    transaction_id: Optional[str] = None
    block_address: Optional[str] = None
    block_timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class ExtractedStatement:
    """
    One statement taken from a journal block.

    Fields:
        text: PartiQL text as committed on the source
        transaction_id: Originating transaction (grouping key)
        index: Position within the block's statement list
    """
    text: str
    transaction_id: Optional[str] = None
    index: int = 0


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return str(value)
    # Ion symbols
    text = getattr(value, "text", None)
    if isinstance(text, str):
        return text
    return None


def _walk(document: Any, path: Sequence[str]) -> Any:
    node = document
    for segment in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(segment)
        if node is None:
            return None
    return node


def _block_address(document: Any) -> Optional[str]:
    address = _walk(document, ("payload", "blockAddress"))
    if not isinstance(address, Mapping):
        return None
    strand = _as_text(address.get("strandId"))
    seq = address.get("sequenceNo")
    if strand is None or seq is None:
        return None
    return f"{strand}/{seq}"


def _block_timestamp(document: Any) -> Optional[datetime]:
    # Ion timestamps load as datetime subclasses
    value = _walk(document, ("payload", "blockTimestamp"))
    return value if isinstance(value, datetime) else None


def parse_block(raw: bytes) -> JournalBlock:
    """
    Decode a payload into a journal block.

    Args:
        raw: Ion payload (binary or text)

    Returns:
        JournalBlock for BLOCK_SUMMARY records

    Raises:
        DecodeSkip: If the payload is empty, not Ion, not a struct, or not
            a BLOCK_SUMMARY record
    """
    if not raw:
        raise DecodeSkip("empty payload")

    try:
        document = simpleion.loads(raw)
    except Exception as e:
        # IonException, or assorted builtin errors from the C extension
        raise DecodeSkip(f"payload is not an Ion document: {e}") from e

    if not isinstance(document, Mapping):
        raise DecodeSkip("payload is not an Ion struct")

    record_type = _as_text(document.get("recordType"))
    if record_type != BLOCK_SUMMARY:
        raise DecodeSkip(f"record type {record_type!r} is not {BLOCK_SUMMARY}")

    return JournalBlock(
        record_type=record_type,
        document=document,
        stream_arn=_as_text(document.get("qldbStreamArn")),
        transaction_id=_as_text(_walk(document, ("payload", "transactionId"))),
        block_address=_block_address(document),
        block_timestamp=_block_timestamp(document),
    )


def decode(raw: bytes) -> Optional[JournalBlock]:
    """Decode a payload, returning None for anything that is not replayable."""
    try:
        return parse_block(raw)
    except DecodeSkip as e:
        logger.debug("Skipping record: %s", e)
        return None


def extract_statements(block: JournalBlock) -> List[ExtractedStatement]:
    """
    List the statements embedded in a block, in commit order.

    Returns an empty list when any segment of the statements path is
    missing (e.g. blocks without transaction info).
    """
    elements = _walk(block.document, STATEMENTS_PATH)
    if not isinstance(elements, SequenceABC) or isinstance(elements, (str, bytes)):
        return []

    statements = []
    for index, element in enumerate(elements):
        if not isinstance(element, Mapping):
            continue
        text = _as_text(element.get("statement"))
        if text is None:
            continue
        statements.append(
            ExtractedStatement(text=text, transaction_id=block.transaction_id, index=index)
        )
    return statements


def dump_text(block: JournalBlock) -> str:
    """Render a block as Ion text."""
    return simpleion.dumps(block.document, binary=False)
