"""Prometheus metrics for Consul KV operations."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

from consul_client.infra.metrics.prometheus import (
    BLOCKING_LATENCY_BUCKETS,
    DEFAULT_LATENCY_BUCKETS,
    REGISTRY,
)

# ──────────────────────────────────────────────────────────────
# Operation metrics
# ──────────────────────────────────────────────────────────────

consul_kv_operations_total = Counter(
    "consul_kv_operations_total",
    "Total Consul KV operations. "
    "Status is success, not_found, rejected (CAS/lock precondition) or failure. "
    "Usage: Increment once per completed request.",
    ["operation", "status"],  # operation: get/get_recurse/keys/put/delete/delete_recurse
    registry=REGISTRY,
)

# ──────────────────────────────────────────────────────────────
# Error metrics
# ──────────────────────────────────────────────────────────────

consul_kv_errors_total = Counter(
    "consul_kv_errors_total",
    "Total errors during Consul KV operations. "
    "Categorized by operation and error type for debugging. "
    "Usage: Increment when any KV request raises.",
    [
        "operation",
        "error_type",
    ],  # error_type: timeout/connection/http_error/invalid_body
    registry=REGISTRY,
)

# ──────────────────────────────────────────────────────────────
# Latency metrics
# ──────────────────────────────────────────────────────────────

consul_kv_operation_duration_seconds = Histogram(
    "consul_kv_operation_duration_seconds",
    "Duration of non-blocking Consul KV requests in seconds.",
    ["operation"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

consul_kv_blocking_query_duration_seconds = Histogram(
    "consul_kv_blocking_query_duration_seconds",
    "Duration of blocking Consul KV queries (index set) in seconds.",
    ["operation"],
    buckets=BLOCKING_LATENCY_BUCKETS,
    registry=REGISTRY,
)
