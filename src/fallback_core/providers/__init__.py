"""
Provider contracts and registry.

Includes:
- Contracts (MultiOpProvider, LegacyProvider, ProviderEntry)
- Registry (NormalizedProvider, normalize_providers, supports, invoke)
- Adapters (wrap_legacy_as_multi_op)
"""

from fallback_core.providers.adapters import LegacyProviderAdapter, wrap_legacy_as_multi_op
from fallback_core.providers.base import LegacyProvider, MultiOpProvider, ProviderEntry
from fallback_core.providers.exceptions import UnsupportedOperationError
from fallback_core.providers.registry import (
    DEFAULT_OPERATION,
    NormalizedProvider,
    filter_by_names,
    invoke,
    normalize_providers,
    supports,
)

__all__ = [
    # Contracts
    "MultiOpProvider",
    "LegacyProvider",
    "ProviderEntry",
    # Registry
    "DEFAULT_OPERATION",
    "NormalizedProvider",
    "normalize_providers",
    "supports",
    "filter_by_names",
    "invoke",
    "UnsupportedOperationError",
    # Adapters
    "LegacyProviderAdapter",
    "wrap_legacy_as_multi_op",
]
