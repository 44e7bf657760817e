"""
Adapters between provider shapes.
"""

from typing import Any, Mapping

from fallback_core.providers.base import LegacyProvider, MultiOpProvider, OperationCallable
from fallback_core.providers.registry import DEFAULT_OPERATION


class LegacyProviderAdapter(MultiOpProvider):
    """
    Exposes a single-operation provider as a multi-operation provider.

    The wrapped provider's `execute` is served under one operation name.
    """

    def __init__(self, provider: LegacyProvider | Any, operation: str = DEFAULT_OPERATION):
        self.wrapped = provider
        self.operation = operation
        self.name = getattr(provider, "name", None) or operation

    @property
    def capabilities(self) -> Mapping[str, OperationCallable]:
        return {self.operation: self.wrapped.execute}


def wrap_legacy_as_multi_op(
    provider: LegacyProvider | Any, operation: str = DEFAULT_OPERATION
) -> MultiOpProvider:
    """
    Wrap a legacy provider so it serves `operation` instead of "default".

    The adapter's name is the provider's `name`, or the operation name
    when the provider has none.
    """
    return LegacyProviderAdapter(provider, operation)
