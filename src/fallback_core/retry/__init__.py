"""
Retry, backoff and fallback orchestration.

This module runs a named operation against a prioritized list of
providers using one of three strategies:

1. **Sequential**: providers in priority order, first success wins
2. **Any**: providers concurrently, first success wins
3. **All**: providers concurrently, every outcome collected

Per-provider retries follow a layered policy (per provider > per
operation > inline > default) and one of seven backoff strategies.
Exhaustion raises AllProvidersFailedError carrying every failed attempt.

Main Components:
    - FallbackEngine: Strategy entry points and the attempt loop
    - compute_delay_ms: Backoff calculator
    - resolve_policy: Layered policy resolver
    - AllProvidersFailedError: Aggregate failure

Usage:
    >>> from fallback_core.retry import FallbackEngine
    >>> engine = FallbackEngine(providers, policy=policy_config, hooks=hooks)
    >>> result = await engine.execute_sequential("upload", payload)
"""

from fallback_core.retry.backoff import compute_delay_ms, retry_after_ms
from fallback_core.retry.engine import FallbackEngine
from fallback_core.retry.exceptions import AllProvidersFailedError
from fallback_core.retry.policy import DEFAULT_POLICY, resolve_policy

__all__ = [
    "FallbackEngine",
    "AllProvidersFailedError",
    "compute_delay_ms",
    "retry_after_ms",
    "resolve_policy",
    "DEFAULT_POLICY",
]
