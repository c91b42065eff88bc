"""
Ledger Replicator

Mirrors committed ledger transactions from a source ledger's change stream
onto an independent destination ledger, and provisions destination tables.
"""

__version__ = "0.1.0"
