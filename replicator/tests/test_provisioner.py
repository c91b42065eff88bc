"""
Tests for table reconciliation.

Covers:
- Only missing tables are created, in one transaction
- Idempotence and case-insensitive matching
- Atomicity when creation fails
- Existing tables are re-read on every call
"""

import pytest

from replicator.core.errors import ConnectivityError, ProvisioningError
from replicator.ledger.memory_client import InMemoryLedgerClient
from replicator.provision.tables import TableNameSet, TableProvisioner, reconcile_tables


def test_creates_only_missing_table():
    """Desired "A,B" with existing {a} creates only B."""
    client = InMemoryLedgerClient(tables={"a"})

    created = reconcile_tables(client, TableNameSet.parse("A,B"))

    assert created == ["B"]
    assert [s.text for s in client.journal] == ["CREATE TABLE B"]
    assert client.tables == {"a", "B"}


def test_nothing_missing_is_a_noop():
    """Desired "A,B" with existing {a,b} creates nothing and succeeds."""
    client = InMemoryLedgerClient(tables={"a", "b"})

    created = reconcile_tables(client, TableNameSet.parse("A,B"))

    assert created == []
    assert client.transactions == []


def test_second_call_creates_zero_tables():
    client = InMemoryLedgerClient()
    desired = TableNameSet.parse("Vehicle, Person, DriversLicense")

    first = reconcile_tables(client, desired)
    schema_after_first = set(client.tables)
    second = reconcile_tables(client, desired)

    assert first == ["Vehicle", "Person", "DriversLicense"]
    assert second == []
    assert client.tables == schema_after_first
    assert len(client.transactions) == 1


def test_existing_lowercase_table_matches_desired_name():
    client = InMemoryLedgerClient(tables={"vehicle"})

    created = reconcile_tables(client, TableNameSet.parse("Vehicle"))

    assert created == []
    assert client.tables == {"vehicle"}


def test_missing_tables_created_in_single_transaction():
    client = InMemoryLedgerClient()

    reconcile_tables(client, TableNameSet.parse("A,B,C"))

    assert len(client.transactions) == 1
    assert [s.text for s in client.transactions[0]] == [
        "CREATE TABLE A",
        "CREATE TABLE B",
        "CREATE TABLE C",
    ]


def test_failure_leaves_no_partial_schema():
    """If creating table N fails, none of the batch's tables exist."""
    client = InMemoryLedgerClient(
        tables={"existing"},
        fail_on=lambda text: text == "CREATE TABLE C",
    )

    with pytest.raises(ProvisioningError, match="Unable to create tables"):
        reconcile_tables(client, TableNameSet.parse("A,B,C,D"))

    assert client.tables == {"existing"}
    assert client.journal == []


def test_concurrency_exhaustion_surfaces_as_provisioning_error():
    client = InMemoryLedgerClient(conflicts=10, retry_limit=2)

    with pytest.raises(ProvisioningError) as excinfo:
        reconcile_tables(client, TableNameSet.parse("A"))

    assert client.attempts == 3
    assert "OCC conflict" in str(excinfo.value)
    assert client.tables == set()


def test_unreachable_ledger_raises_connectivity_error():
    client = InMemoryLedgerClient(unreachable=True)

    with pytest.raises(ConnectivityError):
        reconcile_tables(client, TableNameSet.parse("A"))


def test_invalid_table_name_rejected_before_touching_ledger():
    client = InMemoryLedgerClient()

    with pytest.raises(ProvisioningError, match="Invalid table name"):
        reconcile_tables(client, TableNameSet.parse("Good, Bad Name"))

    assert client.catalog_reads == 0
    assert client.attempts == 0


def test_existing_tables_reread_on_every_call():
    """Tables created elsewhere between calls are seen by the next call."""
    client = InMemoryLedgerClient()
    provisioner = TableProvisioner(client)

    assert provisioner.reconcile(TableNameSet.parse("A")) == ["A"]
    client.tables.add("b")
    assert provisioner.reconcile(TableNameSet.parse("A,B,C")) == ["C"]
    assert client.catalog_reads == 2


def test_newly_desired_table_added_on_later_call():
    client = InMemoryLedgerClient()

    reconcile_tables(client, TableNameSet.parse("A,B"))
    created = reconcile_tables(client, TableNameSet.parse("A,B,C"))

    assert created == ["C"]
    assert [s.text for s in client.transactions[-1]] == ["CREATE TABLE C"]
