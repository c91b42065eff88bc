"""
In-process ledger used for dry runs and tests.

Keeps a table catalog and a journal of committed statements. Statements are
staged per transaction and committed only when all of them succeed, which
mirrors the all-or-nothing behaviour of the real ledger.
"""

import re
from typing import Any, Callable, List, Optional, Sequence, Set

from ..core.errors import ConcurrencyExhausted, ConnectivityError, LedgerError
from ..core.statements import Statement
from .client import LedgerClient

_CREATE_TABLE_RE = re.compile(r"^\s*create\s+table\s+([A-Za-z_][A-Za-z0-9_]*)\s*$", re.IGNORECASE)


class InMemoryLedgerClient(LedgerClient):
    """
    In-memory ledger with fault injection.

    Attributes:
        tables: Committed table names (case-sensitive, like QLDB)
        journal: Every committed statement, in commit order
        transactions: Committed transactions, each a list of statements
        attempts: Number of transaction attempts, including OCC retries
    """

    def __init__(
        self,
        tables: Optional[Set[str]] = None,
        retry_limit: int = 4,
        fail_on: Optional[Callable[[str], bool]] = None,
        conflicts: int = 0,
        unreachable: bool = False,
    ) -> None:
        """
        Initialize in-memory ledger.

        Args:
            tables: Tables that exist up front
            retry_limit: OCC retries per transaction before giving up
            fail_on: Predicate over statement text; matching statements fail
            conflicts: Number of upcoming attempts that hit an OCC conflict
            unreachable: Fail every call with ConnectivityError
        """
        self.tables: Set[str] = set(tables or ())
        self.retry_limit = retry_limit
        self.fail_on = fail_on
        self.conflicts = conflicts
        self.unreachable = unreachable
        self.journal: List[Statement] = []
        self.transactions: List[List[Statement]] = []
        self.attempts = 0
        self.catalog_reads = 0

    def list_table_names(self) -> Set[str]:
        self._check_reachable()
        self.catalog_reads += 1
        return set(self.tables)

    def run_transaction(self, statements: Sequence[Statement]) -> List[List[Any]]:
        self._check_reachable()
        statements = list(statements)

        for _ in range(self.retry_limit + 1):
            self.attempts += 1
            if self.conflicts > 0:
                self.conflicts -= 1
                continue
            return self._commit(statements)

        raise ConcurrencyExhausted(
            f"OCC conflict persisted after {self.retry_limit} retries"
        )

    def _commit(self, statements: List[Statement]) -> List[List[Any]]:
        staged_tables = set(self.tables)
        for stmt in statements:
            if self.fail_on is not None and self.fail_on(stmt.text):
                raise LedgerError(f"Statement rejected: {stmt.text}")
            match = _CREATE_TABLE_RE.match(stmt.text)
            if match:
                name = match.group(1)
                if name in staged_tables:
                    raise LedgerError(f"Table already exists: {name}")
                staged_tables.add(name)

        self.tables = staged_tables
        self.journal.extend(statements)
        self.transactions.append(statements)
        return [[] for _ in statements]

    def _check_reachable(self) -> None:
        if self.unreachable:
            raise ConnectivityError("In-memory ledger marked unreachable")
