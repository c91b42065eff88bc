"""
Custom resource handler that provisions destination ledger tables.

Request:
    {"RequestType": "Create" | "Update" | "Delete",
     "ResourceProperties": {"LedgerName": "...", "TableNameList": "A, B",
                            "ProvisioningRequestId": "..."},
     "PhysicalResourceId": "..."}   # Update / Delete only

Response:
    {"PhysicalResourceId": "<ProvisioningRequestId>-<LedgerName>",
     "Data": {"TablesCreated": [...]}}

Delete never drops tables, to avoid data loss.
"""

import json
from typing import Any, Dict, Optional

from ..core.config import ReplicatorConfig
from ..core.errors import ProvisioningError
from ..core.ids import physical_resource_id
from ..ledger.client import LedgerClient
from ..provision.tables import TableNameSet, reconcile_tables
from .clients import ledger_client
from .logging_config import ensure_logging, get_logger
from .metrics import init_metrics, push_metrics, track_provisioning_duration, track_tables_created


def _properties(event: Dict[str, Any]) -> Dict[str, Any]:
    return event.get("ResourceProperties") or {}


def _ledger_name(event: Dict[str, Any]) -> str:
    ledger_name = _properties(event).get("LedgerName")
    if not ledger_name:
        raise ProvisioningError("ResourceProperties.LedgerName is required")
    return ledger_name


def _request_id(event: Dict[str, Any]) -> str:
    props = _properties(event)
    # CustomResourceId is the property name used by earlier deployments
    request_id = props.get("ProvisioningRequestId") or props.get("CustomResourceId")
    if not request_id:
        raise ProvisioningError("ResourceProperties.ProvisioningRequestId is required")
    return request_id


def on_event(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """Lambda entry point: dispatch on RequestType, log and re-raise errors."""
    ensure_logging()
    init_metrics()
    logger = get_logger(__name__, trace_id=getattr(context, "aws_request_id", None))
    logger.info(f"Processing request: {json.dumps(event, default=str)}")

    request_type = event.get("RequestType")
    try:
        with track_provisioning_duration(str(request_type)):
            if request_type == "Create":
                logger.info(f"Create new resource with props {json.dumps(_properties(event))}")
                client = ledger_client(_ledger_name(event), ReplicatorConfig.from_env())
                return on_create(event, client)
            if request_type == "Update":
                logger.info(
                    f"Update resource {event.get('PhysicalResourceId')} "
                    f"with props {json.dumps(_properties(event))}"
                )
                client = ledger_client(_ledger_name(event), ReplicatorConfig.from_env())
                return on_update(event, client)
            if request_type == "Delete":
                logger.info(
                    f"Delete resource {event.get('PhysicalResourceId')}, "
                    "but do not delete ledger tables to avoid data loss"
                )
                return on_delete(event)
            raise ProvisioningError(f"Unsupported request type: {request_type!r}")
    except Exception as e:
        logger.error(f"Provisioning request failed: {e}")
        raise
    finally:
        push_metrics()


def _reconcile(event: Dict[str, Any], client: LedgerClient) -> list:
    desired = TableNameSet.parse(_properties(event).get("TableNameList"))
    created = reconcile_tables(client, desired)
    track_tables_created(len(created))
    return created


def on_create(event: Dict[str, Any], client: LedgerClient) -> Dict[str, Any]:
    physical_id = physical_resource_id(_request_id(event), _ledger_name(event))
    created = _reconcile(event, client)
    return {
        "PhysicalResourceId": physical_id,
        "Data": {"TablesCreated": created},
    }


def on_update(event: Dict[str, Any], client: LedgerClient) -> Dict[str, Any]:
    physical_id: Optional[str] = event.get("PhysicalResourceId")
    if not physical_id:
        physical_id = physical_resource_id(_request_id(event), _ledger_name(event))
    created = _reconcile(event, client)
    return {
        "PhysicalResourceId": physical_id,
        "Data": {"TablesCreated": created},
    }


def on_delete(event: Dict[str, Any]) -> Dict[str, Any]:
    response: Dict[str, Any] = {}
    if event.get("PhysicalResourceId"):
        response["PhysicalResourceId"] = event["PhysicalResourceId"]
    return response
