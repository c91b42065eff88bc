"""
Builders for stream payloads used across tests.
"""

import base64
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from amazon.ion import simpleion
from prometheus_client.parser import text_string_to_metric_families

STREAM_ARN = "arn:aws:qldb:us-east-1:123456789012:stream/Source/stream-1"
BLOCK_TIME = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)


def block_payload(
    statements: Optional[List[str]] = None,
    record_type: str = "BLOCK_SUMMARY",
    transaction_id: str = "txn-1",
    sequence_no: int = 1,
    block_timestamp: Optional[datetime] = BLOCK_TIME,
) -> bytes:
    """Binary Ion journal record carrying the given statements."""
    payload: Dict[str, Any] = {
        "blockAddress": {"strandId": "strand-1", "sequenceNo": sequence_no},
        "transactionId": transaction_id,
    }
    if block_timestamp is not None:
        payload["blockTimestamp"] = block_timestamp
    if statements is not None:
        payload["transactionInfo"] = {
            "statements": [
                {"statement": s, "statementDigest": f"digest-{i}"}
                for i, s in enumerate(statements)
            ]
        }
    document = {
        "qldbStreamArn": STREAM_ARN,
        "recordType": record_type,
        "payload": payload,
    }
    return simpleion.dumps(document, binary=True)


def kinesis_record(data: bytes, sequence_number: str = "1", partition_key: str = "pk-1") -> Dict[str, Any]:
    return {
        "kinesis": {
            "kinesisSchemaVersion": "1.0",
            "partitionKey": partition_key,
            "sequenceNumber": sequence_number,
            "data": base64.b64encode(data).decode("ascii"),
            "approximateArrivalTimestamp": 1700000000.0,
        },
        "eventSource": "aws:kinesis",
    }


def kinesis_event(payloads: List[bytes]) -> Dict[str, Any]:
    return {
        "Records": [
            kinesis_record(p, sequence_number=str(i + 1)) for i, p in enumerate(payloads)
        ]
    }


def sample_value(text: str, name: str) -> float:
    """Read one sample from Prometheus text exposition output."""
    for family in text_string_to_metric_families(text):
        for sample in family.samples:
            if sample.name == name:
                return sample.value
    raise AssertionError(f"{name} not exported")
