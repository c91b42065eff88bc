"""
Change-stream record model.

Records arrive as a Kinesis event:
    {"Records": [{"kinesis": {"partitionKey": "...", "sequenceNumber": "...",
                              "data": "<base64>", "kinesisSchemaVersion": "1.0",
                              "approximateArrivalTimestamp": 1.6e9}}]}
"""

import base64
import binascii
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ChangeRecord:
    """
    One change-stream record.

    Fields:
        partition_key: Shard routing key
        sequence_number: Position within the shard (non-decreasing per shard)
        data: Decoded payload bytes (empty if the payload was not valid base64)
        schema_version: Stream schema version, if delivered
        arrival_timestamp: Approximate arrival time (epoch seconds), if delivered
    """
    partition_key: str
    sequence_number: str
    data: bytes
    schema_version: Optional[str] = None
    arrival_timestamp: Optional[float] = None

    @classmethod
    def from_kinesis(cls, record: Dict[str, Any]) -> "ChangeRecord":
        """
        Raises:
            ValueError: If the record or its kinesis payload is not an object
        """
        if not isinstance(record, Mapping):
            raise ValueError(f"Stream record is not an object: {record!r}")
        payload = record.get("kinesis", record)
        if not isinstance(payload, Mapping):
            raise ValueError(f"Stream record payload is not an object: {payload!r}")
        return cls(
            partition_key=str(payload.get("partitionKey", "")),
            sequence_number=str(payload.get("sequenceNumber", "")),
            data=_b64decode(payload.get("data")),
            schema_version=payload.get("kinesisSchemaVersion"),
            arrival_timestamp=payload.get("approximateArrivalTimestamp"),
        )


def _b64decode(data: Optional[str]) -> bytes:
    if not data:
        return b""
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError, TypeError):
        return b""


def records_from_event(event: Dict[str, Any]) -> List[ChangeRecord]:
    """
    Build change records from a Kinesis event, in delivery order.

    Raises:
        ValueError: If the event or any of its records is malformed
    """
    if not isinstance(event, Mapping):
        raise ValueError("Stream event is not an object")
    records = event.get("Records") or []
    if not isinstance(records, list):
        raise ValueError("Stream event Records is not a list")
    return [ChangeRecord.from_kinesis(r) for r in records]
