"""
Retry policy models.

A RetryPolicy is a partial policy: every field is optional so that layers
can override each other field by field. EffectivePolicy is the fully
resolved result produced by fallback_core.retry.policy.resolve_policy.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fallback_core.models.enums import BackoffKind


class RetryPolicy(BaseModel):
    """
    Partial retry/backoff policy.

    Fields left as None fall through to the next policy layer.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retry: Optional[int] = Field(
        default=None, ge=0, description="Attempts beyond the first (0 = single attempt)"
    )
    base_delay_ms: Optional[int] = Field(
        default=None, ge=0, description="Base delay used by the backoff strategy"
    )
    max_delay_ms: Optional[int] = Field(
        default=None, ge=0, description="Upper bound for computed delays"
    )
    backoff: Optional[BackoffKind] = Field(
        default=None, description="Backoff strategy between attempts"
    )


class EffectivePolicy(BaseModel):
    """Fully resolved policy for one (operation, provider) pair."""
    model_config = ConfigDict(frozen=True)

    max_retry: int = Field(..., ge=0)
    base_delay_ms: int = Field(..., ge=0)
    max_delay_ms: int = Field(..., ge=0)
    backoff: BackoffKind


class PolicyConfig(BaseModel):
    """
    Global policy configuration supplied at engine construction.

    Layers:
        default: applied when nothing more specific sets a field
        per_operation: keyed by operation name
        per_provider: keyed by provider name (highest precedence)
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    default: Optional[RetryPolicy] = None
    per_operation: dict[str, RetryPolicy] = Field(default_factory=dict)
    per_provider: dict[str, RetryPolicy] = Field(default_factory=dict)
