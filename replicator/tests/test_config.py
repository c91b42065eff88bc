"""
Tests for environment-driven configuration.
"""

import pytest

from replicator.core.config import DEFAULT_RETRY_LIMIT, ReplicatorConfig
from replicator.core.errors import ConfigError

_ENV_KEYS = (
    "REPLICATOR_DEST_LEDGER_NAME",
    "destQldbName",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "REPLICATOR_RETRY_LIMIT",
    "REPLICATOR_GROUP_BY_TRANSACTION",
    "REPLICATOR_LEDGER_ENDPOINT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    config = ReplicatorConfig.from_env()

    assert config.dest_ledger_name is None
    assert config.retry_limit == DEFAULT_RETRY_LIMIT
    assert not config.group_by_transaction
    with pytest.raises(ConfigError):
        config.require_dest_ledger()


def test_values_from_env(monkeypatch):
    monkeypatch.setenv("REPLICATOR_DEST_LEDGER_NAME", "Mirror")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-southeast-2")
    monkeypatch.setenv("REPLICATOR_RETRY_LIMIT", "7")
    monkeypatch.setenv("REPLICATOR_GROUP_BY_TRANSACTION", "1")

    config = ReplicatorConfig.from_env()

    assert config.require_dest_ledger() == "Mirror"
    assert config.region == "ap-southeast-2"
    assert config.retry_limit == 7
    assert config.group_by_transaction


def test_legacy_destination_name(monkeypatch):
    monkeypatch.setenv("destQldbName", "QldbBlogStreaming")

    assert ReplicatorConfig.from_env().dest_ledger_name == "QldbBlogStreaming"


def test_invalid_retry_limit(monkeypatch):
    monkeypatch.setenv("REPLICATOR_RETRY_LIMIT", "many")

    with pytest.raises(ConfigError, match="integer"):
        ReplicatorConfig.from_env()
