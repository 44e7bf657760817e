"""Monitoring and metrics instrumentation for fallback-core.

Exports Prometheus metrics recorded by the orchestration engine.
"""

from fallback_core.monitoring.metrics import (
    all_providers_failed_total,
    backoff_delay_seconds,
    provider_attempt_latency_seconds,
    provider_attempts_total,
)

__all__ = [
    "provider_attempts_total",
    "provider_attempt_latency_seconds",
    "backoff_delay_seconds",
    "all_providers_failed_total",
]
