"""
Prometheus metrics for the replicator entry points.

Counters and histograms live in the default prometheus_client registry and
are created once per process. Batch failures are counted separately so a
swallowed batch error still leaves a retryable-error signal behind.

Usage:
    from replicator.lambdas.metrics import init_metrics, track_batch

    init_metrics()
    with track_batch_duration():
        result = replayer.on_batch(records)
    track_batch(result)
    push_metrics()

A Lambda container cannot be scraped, so each invocation pushes the registry
to a Prometheus Pushgateway when one is configured.

Environment Variables:
    REPLICATOR_METRICS_PUSHGATEWAY: Pushgateway address (host:port or URL) - default: unset (no push)
    REPLICATOR_METRICS_JOB: Job label for pushed metrics - default: ledger-replicator
"""

import logging
import os
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, generate_latest, push_to_gateway

from ..stream.replayer import BatchResult

logger = logging.getLogger(__name__)

STATEMENTS_REPLAYED: "Counter" = None  # type: ignore
STATEMENTS_READ_ONLY: "Counter" = None  # type: ignore
STATEMENT_FAILURES: "Counter" = None  # type: ignore
RECORDS_SKIPPED: "Counter" = None  # type: ignore
BATCH_FAILURES: "Counter" = None  # type: ignore
TABLES_CREATED: "Counter" = None  # type: ignore
BATCH_DURATION: "Histogram" = None  # type: ignore
PROVISIONING_DURATION: "Histogram" = None  # type: ignore

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics() -> None:
    """
    Initialize Prometheus metrics (safe to call on every invocation).

    Thread-safe via module-level lock.
    """
    global STATEMENTS_REPLAYED, STATEMENTS_READ_ONLY, STATEMENT_FAILURES
    global RECORDS_SKIPPED, BATCH_FAILURES, TABLES_CREATED
    global BATCH_DURATION, PROVISIONING_DURATION
    global _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        STATEMENTS_REPLAYED = Counter(
            "replicator_statements_replayed_total",
            "Statements applied to the destination ledger",
        )
        STATEMENTS_READ_ONLY = Counter(
            "replicator_statements_read_only_total",
            "Statements skipped because they are read-only",
        )
        STATEMENT_FAILURES = Counter(
            "replicator_statement_failures_total",
            "Statements whose replay failed",
        )
        RECORDS_SKIPPED = Counter(
            "replicator_records_skipped_total",
            "Change records that were not BLOCK_SUMMARY or failed to decode",
        )
        BATCH_FAILURES = Counter(
            "replicator_batch_failures_total",
            "Batches cut short by a hard failure (redelivery expected)",
        )
        TABLES_CREATED = Counter(
            "replicator_tables_created_total",
            "Tables created on the destination ledger",
        )
        BATCH_DURATION = Histogram(
            "replicator_batch_duration_seconds",
            "Duration of change batch replay in seconds",
            buckets=(0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0),
        )
        PROVISIONING_DURATION = Histogram(
            "replicator_provisioning_duration_seconds",
            "Duration of provisioning requests in seconds",
            labelnames=["request_type"],
            buckets=(0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0),
        )

        _metrics_initialized = True
        logger.debug("Prometheus metrics initialized")


@contextmanager
def track_batch_duration() -> Generator[None, None, None]:
    if BATCH_DURATION is None:
        yield
        return

    with BATCH_DURATION.time():
        yield


@contextmanager
def track_provisioning_duration(request_type: str) -> Generator[None, None, None]:
    """
    Context manager for tracking provisioning duration.

    Args:
        request_type: Create, Update or Delete
    """
    if PROVISIONING_DURATION is None:
        yield
        return

    with PROVISIONING_DURATION.labels(request_type=request_type).time():
        yield


def track_batch(result: BatchResult) -> None:
    """Record the counters of one replayed batch."""
    if STATEMENTS_REPLAYED is None:
        return
    STATEMENTS_REPLAYED.inc(result.replayed)
    STATEMENTS_READ_ONLY.inc(result.read_only)
    STATEMENT_FAILURES.inc(result.failed_statements)
    RECORDS_SKIPPED.inc(result.skipped_records)
    if result.failed:
        BATCH_FAILURES.inc()


def track_batch_failure() -> None:
    """Count a batch that failed before replay could start."""
    if BATCH_FAILURES is not None:
        BATCH_FAILURES.inc()


def track_tables_created(count: int) -> None:
    if TABLES_CREATED is not None:
        TABLES_CREATED.inc(count)


def metrics_text(registry: CollectorRegistry = REGISTRY) -> str:
    """Render the registry in the Prometheus text exposition format."""
    return generate_latest(registry).decode("utf-8")


def push_metrics(
    gateway: Optional[str] = None,
    job: Optional[str] = None,
    registry: CollectorRegistry = REGISTRY,
) -> bool:
    """
    Push the registry to a Pushgateway.

    Args:
        gateway: Pushgateway address (from REPLICATOR_METRICS_PUSHGATEWAY env var)
        job: Job label (from REPLICATOR_METRICS_JOB env var)
        registry: Registry to push

    Returns:
        True if metrics were pushed. A missing gateway or a failed push
        returns False; metrics export never fails an invocation.
    """
    gateway = gateway or os.getenv("REPLICATOR_METRICS_PUSHGATEWAY")
    if not gateway:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Metrics push disabled, current values:\n%s", metrics_text(registry))
        return False

    job = job or os.getenv("REPLICATOR_METRICS_JOB", "ledger-replicator")
    try:
        push_to_gateway(gateway, job=job, registry=registry)
    except Exception as e:
        logger.error(f"Failed to push metrics to {gateway}: {e}")
        return False
    return True
