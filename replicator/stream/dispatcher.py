"""
Statement filtering and replay.

Each statement is replayed in its own destination transaction so that one
bad statement does not block the ones after it. replay_group() is the
stricter alternative that keeps a source transaction's statements together.
"""

import logging
from typing import List, Optional, Sequence

from ..core.errors import ConnectivityError, LedgerError, StatementReplayError
from ..core.statements import Statement, is_read_only
from ..ledger.client import LedgerClient

logger = logging.getLogger(__name__)


def should_replay(text: str) -> bool:
    """
    Decide whether a statement must be applied to the destination.

    Returns False for blank statements and for read-only statements
    (leading keyword SELECT, any case, surrounding whitespace ignored).
    """
    if not text or not text.strip():
        return False
    return not is_read_only(text)


class StatementDispatcher:
    """
    Replays statements against the destination ledger.

    ConnectivityError is not wrapped: an unreachable destination fails the
    whole batch rather than each remaining statement in turn.
    """

    def __init__(self, client: LedgerClient) -> None:
        self.client = client

    def replay(self, text: str, transaction_id: Optional[str] = None) -> None:
        """
        Replay one statement in its own transaction.

        Raises:
            StatementReplayError: If the statement fails on the destination
            ConnectivityError: If the destination is unreachable
        """
        try:
            self.client.run_transaction([Statement(text)])
        except ConnectivityError:
            raise
        except LedgerError as e:
            raise StatementReplayError(text, transaction_id, str(e)) from e
        logger.info("Successfully executed the statement of %s", text)

    def replay_group(self, texts: Sequence[str], transaction_id: Optional[str] = None) -> None:
        """
        Replay all statements of one source transaction in one transaction.

        Raises:
            StatementReplayError: If the transaction fails; nothing is applied
            ConnectivityError: If the destination is unreachable
        """
        statements: List[Statement] = [Statement(t) for t in texts]
        if not statements:
            return
        try:
            self.client.run_transaction(statements)
        except ConnectivityError:
            raise
        except LedgerError as e:
            raise StatementReplayError("; ".join(texts), transaction_id, str(e)) from e
        logger.info(
            "Successfully executed %d statement(s) of transaction %s",
            len(statements),
            transaction_id,
        )
