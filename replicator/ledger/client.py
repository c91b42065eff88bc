"""
LedgerClient abstract interface.

Defines contract for destination ledger implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Sequence, Set

from ..core.statements import Statement


class LedgerClient(ABC):
    """
    Abstract transactional ledger interface.

    All implementations must guarantee:
    - All-or-nothing commit per run_transaction call
    - Transparent retry on optimistic-concurrency conflict, bounded
    - Fresh catalog reads (no cached table list)
    """

    @abstractmethod
    def list_table_names(self) -> Set[str]:
        """
        Return names of active tables in the ledger.

        Raises:
            ConnectivityError: If the ledger is unreachable
        """
        ...

    @abstractmethod
    def run_transaction(self, statements: Sequence[Statement]) -> List[List[Any]]:
        """
        Execute statements in one atomic transaction.

        Args:
            statements: Statements in execution order

        Returns:
            Result rows for each statement, in order

        Raises:
            ConnectivityError: If the ledger is unreachable
            ConcurrencyExhausted: If OCC conflicts outlast the retry limit
            LedgerError: If the transaction fails for any other reason
        """
        ...

    def run_statement(self, text: str, *params: Any) -> List[Any]:
        """Execute a single statement in its own transaction."""
        return self.run_transaction([Statement(text, tuple(params))])[0]

    def close(self) -> None:
        """
        Release resources held by the client.

        Implementations may override. Default does nothing.
        """
        return None

    def __enter__(self) -> "LedgerClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
