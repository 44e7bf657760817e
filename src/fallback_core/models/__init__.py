"""
Data models for fallback-core.

Includes:
- Enums (BackoffKind, ExecutionStrategy)
- Policy models (RetryPolicy, EffectivePolicy, PolicyConfig)
- Outcome records (AttemptRecord, AttemptContext, ProviderOutcome)
"""

from fallback_core.models.enums import BackoffKind, ExecutionStrategy
from fallback_core.models.outcomes import AttemptContext, AttemptRecord, ProviderOutcome
from fallback_core.models.policy import EffectivePolicy, PolicyConfig, RetryPolicy

__all__ = [
    # Enums
    "BackoffKind",
    "ExecutionStrategy",
    # Policy models
    "RetryPolicy",
    "EffectivePolicy",
    "PolicyConfig",
    # Outcome records
    "AttemptRecord",
    "AttemptContext",
    "ProviderOutcome",
]
