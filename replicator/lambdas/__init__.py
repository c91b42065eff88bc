"""
Lambda entry points.

- provision_tables.on_event: custom resource handler creating destination tables
- replay_statements.on_event: stream consumer replaying statements on the destination
"""
