"""
Layered retry policy resolution.

Precedence, highest first, resolved field by field:
    per_provider[provider] > per_operation[operation] > provider inline policy
    > global default > hardcoded defaults

A layer that leaves a field unset falls through to the next layer for
that field only.
"""

from typing import Optional

from fallback_core.models.enums import BackoffKind
from fallback_core.models.policy import EffectivePolicy, PolicyConfig, RetryPolicy

DEFAULT_POLICY = EffectivePolicy(
    max_retry=0,
    base_delay_ms=200,
    max_delay_ms=5000,
    backoff=BackoffKind.FULL_JITTER,
)

_FIELDS = ("max_retry", "base_delay_ms", "max_delay_ms", "backoff")


def coalesce_policies(*layers: Optional[RetryPolicy]) -> EffectivePolicy:
    """Merge partial policies, first layer wins per field, DEFAULT_POLICY fills the rest."""
    merged = {}
    for field_name in _FIELDS:
        for layer in layers:
            if layer is None:
                continue
            value = getattr(layer, field_name)
            if value is not None:
                merged[field_name] = value
                break
        else:
            merged[field_name] = getattr(DEFAULT_POLICY, field_name)
    return EffectivePolicy(**merged)


def resolve_policy(
    provider_name: str,
    operation: Optional[str] = None,
    global_policy: Optional[PolicyConfig] = None,
    provider_inline_policy: Optional[RetryPolicy] = None,
) -> EffectivePolicy:
    """
    Resolve the effective policy for one (operation, provider) pair.

    Args:
        provider_name: Provider the policy applies to
        operation: Operation name (per-operation layer skipped when None)
        global_policy: Engine-wide PolicyConfig
        provider_inline_policy: Policy declared on the provider entry

    Returns:
        EffectivePolicy with every field set
    """
    per_provider = per_operation = global_default = None
    if global_policy is not None:
        per_provider = global_policy.per_provider.get(provider_name)
        if operation is not None:
            per_operation = global_policy.per_operation.get(operation)
        global_default = global_policy.default

    return coalesce_policies(per_provider, per_operation, provider_inline_policy, global_default)
