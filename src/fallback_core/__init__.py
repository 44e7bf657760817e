"""
fallback-core: multi-provider orchestration with retry, backoff and fallback.

Runs a named operation (upload, send-message, ...) against a prioritized
set of interchangeable providers:
- Sequential failover in priority order
- Concurrent execution resolving on the first success
- Concurrent execution collecting every provider's outcome

Architecture: provider registry + layered retry policies + async attempt loop
"""

__version__ = "0.1.0"

from fallback_core.exceptions import FallbackCoreError
from fallback_core.hooks import EngineHooks
from fallback_core.models import (
    AttemptContext,
    AttemptRecord,
    BackoffKind,
    PolicyConfig,
    ProviderOutcome,
    RetryPolicy,
)
from fallback_core.providers import (
    LegacyProvider,
    MultiOpProvider,
    ProviderEntry,
    UnsupportedOperationError,
    wrap_legacy_as_multi_op,
)
from fallback_core.retry import AllProvidersFailedError, FallbackEngine

__all__ = [
    "FallbackEngine",
    "EngineHooks",
    "ProviderEntry",
    "MultiOpProvider",
    "LegacyProvider",
    "wrap_legacy_as_multi_op",
    "RetryPolicy",
    "PolicyConfig",
    "BackoffKind",
    "AttemptContext",
    "AttemptRecord",
    "ProviderOutcome",
    "FallbackCoreError",
    "AllProvidersFailedError",
    "UnsupportedOperationError",
]
