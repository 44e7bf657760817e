"""
Provider registry.

Normalizes heterogeneous provider declarations into NormalizedProvider
records once, at engine construction. Declaration order is preserved and
is the priority order for sequential execution.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

import structlog

from fallback_core.models.policy import RetryPolicy
from fallback_core.providers.base import ProviderEntry
from fallback_core.providers.exceptions import UnsupportedOperationError

logger = structlog.get_logger(__name__)

DEFAULT_OPERATION = "default"
"""Synthetic operation name served by single-operation (legacy) providers."""


@dataclass(frozen=True)
class NormalizedProvider:
    """
    Uniform internal view of a provider.

    Attributes:
        name: Resolved provider name
        provider: Original provider object
        is_multi: True when the provider exposes a `capabilities` mapping
        policy: Inline policy merged from the entry (None if nothing set)
    """

    name: str
    provider: Any
    is_multi: bool
    policy: Optional[RetryPolicy] = None


def _provider_name(provider: Any, is_multi: bool) -> str:
    name = getattr(provider, "name", None)
    if name:
        return str(name)
    if is_multi:
        raise ValueError(f"Multi-operation provider {provider!r} must define a name")
    return type(provider).__name__ or "legacy"


def _inline_policy(entry: ProviderEntry) -> Optional[RetryPolicy]:
    """Fold legacy per-entry retry fields into the entry's inline policy."""
    overrides = {}
    if entry.max_retry is not None:
        overrides["max_retry"] = entry.max_retry
    if entry.retry_delay_ms is not None:
        overrides["base_delay_ms"] = entry.retry_delay_ms
    if entry.backoff is not None:
        overrides["backoff"] = entry.backoff

    if not overrides:
        return entry.policy
    base = entry.policy.model_dump() if entry.policy is not None else {}
    return RetryPolicy(**{**base, **overrides})


def normalize_providers(entries: Iterable[ProviderEntry | Any]) -> list[NormalizedProvider]:
    """
    Normalize provider declarations.

    Bare provider objects are accepted and treated as entries without an
    inline policy. When two entries resolve to the same name, the later
    one replaces the earlier one in the earlier one's priority slot.

    Args:
        entries: ProviderEntry objects or bare providers, in priority order

    Returns:
        NormalizedProvider list in declaration order
    """
    normalized: list[NormalizedProvider] = []
    index_by_name: dict[str, int] = {}

    for entry in entries:
        if not isinstance(entry, ProviderEntry):
            entry = ProviderEntry(provider=entry)
        provider = entry.provider
        is_multi = getattr(provider, "capabilities", None) is not None
        if not is_multi and not callable(getattr(provider, "execute", None)):
            raise TypeError(
                f"Provider {provider!r} exposes neither `capabilities` nor `execute`"
            )

        record = NormalizedProvider(
            name=_provider_name(provider, is_multi),
            provider=provider,
            is_multi=is_multi,
            policy=_inline_policy(entry),
        )

        if record.name in index_by_name:
            logger.warning(
                "Duplicate provider name, later declaration replaces earlier one",
                provider=record.name,
            )
            normalized[index_by_name[record.name]] = record
        else:
            index_by_name[record.name] = len(normalized)
            normalized.append(record)

    return normalized


def supports(provider: NormalizedProvider, operation: str) -> bool:
    """Return True if the provider declares a callable for the operation."""
    if provider.is_multi:
        return callable(provider.provider.capabilities.get(operation))
    return operation == DEFAULT_OPERATION


def filter_by_names(
    providers: Sequence[NormalizedProvider],
    provider_names: Optional[Iterable[str]] = None,
) -> list[NormalizedProvider]:
    """
    Restrict providers to an allow-list of names, keeping declaration order.

    An absent or empty allow-list keeps every provider. A single name may
    be passed as a plain string.
    """
    if isinstance(provider_names, str):
        provider_names = [provider_names]
    allowed = set(provider_names or ())
    if not allowed:
        return list(providers)
    return [p for p in providers if p.name in allowed]


async def _maybe_await(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


async def _call_provider_hook(provider: NormalizedProvider, hook_name: str, *args: Any) -> None:
    hook = getattr(provider.provider, hook_name, None)
    if hook is None:
        return
    try:
        await _maybe_await(hook(*args))
    except Exception:
        logger.warning(
            "Provider hook failed, ignoring",
            provider=provider.name,
            hook=hook_name,
            exc_info=True,
        )


async def invoke(provider: NormalizedProvider, operation: str, input: Any) -> Any:
    """
    Run one attempt of an operation on a provider.

    Operation callables and `execute` may be coroutine functions or plain
    functions. The provider's before/after hooks (multi-operation
    providers only) are called around the operation; their failures are
    logged and swallowed. Errors from the operation itself propagate to
    the caller.

    Raises:
        UnsupportedOperationError: Provider does not declare the operation
    """
    if not supports(provider, operation):
        raise UnsupportedOperationError(provider.name, operation)

    if not provider.is_multi:
        return await _maybe_await(provider.provider.execute(input))

    await _call_provider_hook(provider, "before_execute_op", operation, input)
    output = await _maybe_await(provider.provider.capabilities[operation](input))
    await _call_provider_hook(provider, "after_execute_op", operation, input, output)
    return output
