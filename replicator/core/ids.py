"""
Stable identifier generation.
"""


def physical_resource_id(request_id: str, ledger_name: str) -> str:
    """
    Derive the identity reported back to the provisioning trigger.

    Repeated create/update calls with the same inputs yield the same id, so
    the caller treats them as one logical resource.

    Args:
        request_id: Provisioning request identifier
        ledger_name: Destination ledger name

    Returns:
        "<request_id>-<ledger_name>"

    Example:
        physical_resource_id("tables", "Mirror") -> "tables-Mirror"
    """
    return f"{request_id}-{ledger_name}"
