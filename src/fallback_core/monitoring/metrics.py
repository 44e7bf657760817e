"""Prometheus metrics for provider orchestration.

These metrics are registered in the default prometheus_client registry and
can be exposed by the host application (e.g. prometheus_client.start_http_server).
Alert rules should be configured for:
- provider_attempts_total (high failure ratio for a provider)
- all_providers_failed_total (any increase means callers saw a hard failure)
"""

from prometheus_client import Counter, Histogram

# === Attempt Metrics ===

provider_attempts_total = Counter(
    "provider_attempts_total",
    "Total provider attempts by provider, operation and outcome",
    ["provider", "operation", "outcome"],
)
"""
Attempt counter.

Labels:
- provider: Provider name
- operation: Operation name
- outcome: success, failure

Alert thresholds:
- WARN: failure ratio > 10% for a provider over 5m
- CRITICAL: failure ratio > 50% for a provider over 5m
"""

provider_attempt_latency_seconds = Histogram(
    "provider_attempt_latency_seconds",
    "Duration of single provider attempts in seconds",
    ["provider", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# === Backoff Metrics ===

backoff_delay_seconds = Histogram(
    "backoff_delay_seconds",
    "Scheduled backoff delay before a retry, in seconds",
    ["provider", "operation"],
    buckets=[0.0, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 60.0],
)
"""
Backoff delay histogram.

Includes delays imposed by retry-after hints, which can exceed the
configured policy cap.
"""

# === Aggregate Failure Metrics ===

all_providers_failed_total = Counter(
    "all_providers_failed_total",
    "Calls where every eligible provider failed, by operation and strategy",
    ["operation", "strategy"],
)
"""
Aggregate failure counter.

Labels:
- operation: Operation name
- strategy: sequential, any, all (all only counts calls with no eligible provider)
"""
