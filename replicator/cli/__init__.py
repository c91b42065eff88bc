"""
Ledger Replicator CLI

Commands:
- ledger-replicator provision - Create missing destination tables
- ledger-replicator replay - Replay a saved stream event file
- ledger-replicator decode - Inspect the records of a saved stream event file
"""
