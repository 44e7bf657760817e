"""
Lifecycle hooks for observability.

Hooks are optional callables, sync or async, supplied at engine
construction. They are notified of every attempt outcome and of the
all-failed condition. A hook can never change the outcome of a call:
call_hook logs and discards anything a hook raises.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

import structlog

from fallback_core.models.outcomes import AttemptContext, AttemptRecord

logger = structlog.get_logger(__name__)

HookResult = Union[None, Awaitable[None]]

SuccessHook = Callable[[AttemptContext, Any, Any], HookResult]
FailureHook = Callable[[AttemptContext, Any, BaseException], HookResult]
AllFailedHook = Callable[[AttemptContext, Any, Sequence[AttemptRecord]], HookResult]


@dataclass(frozen=True)
class EngineHooks:
    """
    Global hooks invoked by FallbackEngine.

    Attributes:
        on_provider_success: (ctx, input, output) after each successful attempt
        on_provider_fail: (ctx, input, error) after each failed attempt
        on_all_failed: (ctx, input, attempts) once per call when nothing succeeded
    """

    on_provider_success: Optional[SuccessHook] = None
    on_provider_fail: Optional[FailureHook] = None
    on_all_failed: Optional[AllFailedHook] = None


async def call_hook(hook: Optional[Callable[..., HookResult]], *args: Any) -> None:
    """
    Invoke a hook, awaiting it if it returns an awaitable.

    Exceptions raised by the hook are logged and swallowed.
    """
    if hook is None:
        return
    try:
        result = hook(*args)
        if inspect.isawaitable(result):
            await result
    except Exception:
        logger.warning(
            "Hook raised, ignoring",
            hook=getattr(hook, "__name__", repr(hook)),
            exc_info=True,
        )
