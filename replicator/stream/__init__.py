"""
Change-stream replay.

This module provides:
- ChangeRecord: One record of the change stream
- decode / extract_statements: Ion journal block decoding
- should_replay / StatementDispatcher: Read-only filtering and replay
- ChangeReplayer: Ordered, per-batch replay loop
"""

from .records import ChangeRecord, records_from_event
from .decoder import (
    BLOCK_SUMMARY,
    JournalBlock,
    ExtractedStatement,
    parse_block,
    decode,
    extract_statements,
    dump_text,
)
from .dispatcher import StatementDispatcher, should_replay
from .replayer import BatchResult, ChangeReplayer

__all__ = [
    "ChangeRecord",
    "records_from_event",
    "BLOCK_SUMMARY",
    "JournalBlock",
    "ExtractedStatement",
    "parse_block",
    "decode",
    "extract_statements",
    "dump_text",
    "StatementDispatcher",
    "should_replay",
    "BatchResult",
    "ChangeReplayer",
]
