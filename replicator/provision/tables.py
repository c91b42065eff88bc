"""
Table reconciliation against the destination ledger.

The existing catalog is read fresh on every call; nothing about existing
tables is cached between invocations.
"""

import logging
import re
from typing import Iterable, Iterator, List, Optional

from ..core.errors import LedgerError, ProvisioningError
from ..core.statements import Statement
from ..ledger.client import LedgerClient

logger = logging.getLogger(__name__)

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class TableNameSet:
    """
    Deduplicated, case-insensitive set of table names.

    Keeps the first casing seen for each name and the order names were given.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: List[str] = []
        self._keys = set()
        for name in names:
            self.add(name)

    @classmethod
    def parse(cls, table_name_list: Optional[str]) -> "TableNameSet":
        """
        Parse a comma-separated table name list.

        Entries are trimmed; empty entries are dropped.

        Example:
            TableNameSet.parse("Vehicle, Person,vehicle") -> ["Vehicle", "Person"]
        """
        if not table_name_list:
            return cls()
        return cls(part.strip() for part in table_name_list.split(","))

    def add(self, name: str) -> None:
        name = name.strip()
        if not name:
            return
        key = name.lower()
        if key in self._keys:
            return
        self._keys.add(key)
        self._names.append(name)

    def difference(self, existing: Iterable[str]) -> List[str]:
        """Names not present in existing (case-insensitive), in original order."""
        existing_lc = {e.lower() for e in existing}
        return [n for n in self._names if n.lower() not in existing_lc]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"TableNameSet({self._names!r})"


def _validate_table_name(name: str) -> None:
    if not _TABLE_NAME_RE.match(name):
        raise ProvisioningError(f"Invalid table name: {name!r}")


class TableProvisioner:
    """
    Reconcile a desired table set against the destination ledger.

    Guarantees:
    - Idempotent: a second call with the same set creates nothing
    - Atomic: all missing tables are created in one transaction, or none
    """

    def __init__(self, client: LedgerClient) -> None:
        self.client = client

    def reconcile(self, desired: TableNameSet) -> List[str]:
        """
        Create every desired table that does not exist yet.

        Args:
            desired: Tables that must exist

        Returns:
            Names of the tables created (empty when nothing was missing)

        Raises:
            ConnectivityError: If the catalog cannot be read
            ProvisioningError: If a name is invalid or creation fails
        """
        for name in desired:
            _validate_table_name(name)

        existing = self.client.list_table_names()
        logger.info(
            "Existing table names with lowercase are %s",
            sorted(e.lower() for e in existing),
        )

        missing = desired.difference(existing)
        if not missing:
            logger.info("All required tables exist in the ledger, no table to be created")
            return []

        statements = [Statement(f"CREATE TABLE {name}") for name in missing]
        logger.info("Tables to be created are %s", missing)

        try:
            self.client.run_transaction(statements)
        except LedgerError as e:
            logger.error("Unable to create tables %s: %s", missing, e)
            raise ProvisioningError(f"Unable to create tables {missing}: {e}") from e

        for name in missing:
            logger.info("Successfully created table %s", name)
        return missing


def reconcile_tables(client: LedgerClient, desired: TableNameSet) -> List[str]:
    """Shortcut for TableProvisioner(client).reconcile(desired)."""
    return TableProvisioner(client).reconcile(desired)
