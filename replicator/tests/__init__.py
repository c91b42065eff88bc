"""
Test suite for the ledger replicator.

Focus areas:
- Idempotent, atomic table provisioning
- Journal block decoding and read-only filtering
- Ordered, failure-isolated replay
"""
