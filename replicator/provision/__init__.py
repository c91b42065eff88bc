"""
Destination schema provisioning.

This module provides:
- TableNameSet: Case-insensitive, order-preserving set of table names
- TableProvisioner / reconcile_tables: Create only the missing tables, atomically
- ProviderRegistry: Process-wide get-or-create registry for shared clients
"""

from .tables import TableNameSet, TableProvisioner, reconcile_tables
from .registry import ProviderRegistry, registry

__all__ = [
    "TableNameSet",
    "TableProvisioner",
    "reconcile_tables",
    "ProviderRegistry",
    "registry",
]
