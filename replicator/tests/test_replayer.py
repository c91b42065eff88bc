"""
Tests for the change replayer.

Covers:
- Read-only statements are never replayed, others exactly once
- Destination order equals input order
- Per-statement failures do not stop the batch
- Hard failures are swallowed and reported
"""

from replicator.ledger.memory_client import InMemoryLedgerClient
from replicator.stream.dispatcher import StatementDispatcher
from replicator.stream.records import ChangeRecord
from replicator.stream.replayer import ChangeReplayer
from replicator.tests.helpers import block_payload


def _record(data: bytes, seq: int = 1) -> ChangeRecord:
    return ChangeRecord(partition_key="pk-1", sequence_number=str(seq), data=data)


def _replayer(client, group_by_transaction=False) -> ChangeReplayer:
    return ChangeReplayer(StatementDispatcher(client), group_by_transaction=group_by_transaction)


def test_select_statement_is_not_replayed():
    client = InMemoryLedgerClient()

    result = _replayer(client).on_batch([_record(block_payload(["SELECT * FROM A"]))])

    assert client.attempts == 0
    assert result.read_only == 1
    assert result.replayed == 0


def test_insert_statement_replayed_once_with_exact_text():
    client = InMemoryLedgerClient()
    text = "INSERT INTO A VALUE {'VIN': '1N4AL11D75C109151'}"

    result = _replayer(client).on_batch([_record(block_payload([text]))])

    assert [s.text for s in client.journal] == [text]
    assert len(client.transactions) == 1
    assert result.replayed == 1


def test_control_record_replays_nothing_and_does_not_fail():
    client = InMemoryLedgerClient()

    result = _replayer(client).on_batch(
        [_record(block_payload(["INSERT INTO A VALUE {'id': 1}"], record_type="CONTROL"))]
    )

    assert client.attempts == 0
    assert result.skipped_records == 1
    assert not result.failed


def test_garbage_record_is_skipped():
    client = InMemoryLedgerClient()

    result = _replayer(client).on_batch([
        _record(b"garbage"),
        _record(block_payload(["DELETE FROM A"]), seq=2),
    ])

    assert result.skipped_records == 1
    assert [s.text for s in client.journal] == ["DELETE FROM A"]


def test_destination_order_matches_input_order():
    client = InMemoryLedgerClient()
    texts = [f"INSERT INTO A VALUE {{'n': {i}}}" for i in range(20)]
    records = [_record(block_payload([t], transaction_id=f"txn-{i}"), seq=i) for i, t in enumerate(texts)]

    result = _replayer(client).on_batch(records)

    assert [s.text for s in client.journal] == texts
    assert result.replayed == 20


def test_statements_within_block_keep_order_and_skip_reads():
    client = InMemoryLedgerClient()
    block = block_payload([
        "INSERT INTO A VALUE {'id': 1}",
        "select * from A",
        "UPDATE A SET x = 2 WHERE id = 1",
    ])

    result = _replayer(client).on_batch([_record(block)])

    assert [s.text for s in client.journal] == [
        "INSERT INTO A VALUE {'id': 1}",
        "UPDATE A SET x = 2 WHERE id = 1",
    ]
    assert len(client.transactions) == 2
    assert result.statements == 3
    assert result.read_only == 1


def test_failed_statement_does_not_block_later_statements():
    client = InMemoryLedgerClient(fail_on=lambda text: "bad" in text)
    records = [
        _record(block_payload(["INSERT INTO A VALUE {'id': 'bad'}", "INSERT INTO A VALUE {'id': 2}"]), seq=1),
        _record(block_payload(["INSERT INTO A VALUE {'id': 3}"]), seq=2),
    ]

    result = _replayer(client).on_batch(records)

    assert [s.text for s in client.journal] == [
        "INSERT INTO A VALUE {'id': 2}",
        "INSERT INTO A VALUE {'id': 3}",
    ]
    assert result.failed_statements == 1
    assert result.replayed == 2
    assert not result.failed
    assert "bad" in result.errors[0]


def test_unreachable_destination_aborts_batch_without_raising():
    client = InMemoryLedgerClient(unreachable=True)
    records = [_record(block_payload(["INSERT INTO A VALUE {'id': 1}"]), seq=i) for i in range(3)]

    result = _replayer(client).on_batch(records)

    assert result.failed
    assert "unreachable" in result.error
    assert result.records == 1
    assert result.replayed == 0


def test_unexpected_error_is_swallowed():
    class ExplodingDispatcher(StatementDispatcher):
        def replay(self, text, transaction_id=None):
            raise RuntimeError("transport closed")

    replayer = ChangeReplayer(ExplodingDispatcher(InMemoryLedgerClient()))

    result = replayer.on_batch([_record(block_payload(["INSERT INTO A VALUE {'id': 1}"]))])

    assert result.failed
    assert result.error == "transport closed"


def test_grouping_replays_block_in_one_transaction():
    client = InMemoryLedgerClient()
    block = block_payload([
        "INSERT INTO A VALUE {'id': 1}",
        "SELECT * FROM A",
        "UPDATE A SET x = 2",
    ], transaction_id="txn-7")

    result = _replayer(client, group_by_transaction=True).on_batch([_record(block)])

    assert len(client.transactions) == 1
    assert [s.text for s in client.transactions[0]] == [
        "INSERT INTO A VALUE {'id': 1}",
        "UPDATE A SET x = 2",
    ]
    assert result.replayed == 2
    assert result.read_only == 1


def test_grouping_failure_counts_every_statement_of_the_transaction():
    client = InMemoryLedgerClient(fail_on=lambda text: text.startswith("UPDATE"))
    block = block_payload(["INSERT INTO A VALUE {'id': 1}", "UPDATE A SET x = 2"])

    result = _replayer(client, group_by_transaction=True).on_batch([_record(block)])

    assert client.journal == []
    assert result.failed_statements == 2
    assert not result.failed
