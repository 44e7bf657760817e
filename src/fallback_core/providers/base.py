"""
Provider contracts.

Defines the two provider shapes the engine accepts:

- MultiOpProvider: exposes several operations through a `capabilities`
  mapping of operation name -> callable (async or plain).
- LegacyProvider: exposes a single `execute` callable, reachable under
  the synthetic "default" operation.

Subclassing is optional. The registry recognizes any object with a
`capabilities` mapping as multi-operation, and anything else with an
`execute` callable as legacy.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from fallback_core.models.enums import BackoffKind
from fallback_core.models.policy import RetryPolicy

OperationCallable = Callable[[Any], Union[Any, Awaitable[Any]]]


class MultiOpProvider(ABC):
    """
    Abstract base class for multi-operation providers.

    Responsibilities:
    - Perform each declared operation and raise on failure
    - Be safely retryable (attempts may be repeated)
    - Be concurrency safe (parallel strategies call providers simultaneously)

    Does NOT handle:
    - Retries, backoff or fallback (that's FallbackEngine's job)

    The `name` must be unique among the providers of one engine.
    """

    name: str

    @property
    @abstractmethod
    def capabilities(self) -> Mapping[str, OperationCallable]:
        """
        Operations implemented by this provider.

        Returns:
            Mapping of operation name to a callable `input -> output`;
            coroutine functions are awaited, plain functions are called
        """
        pass

    async def before_execute_op(self, operation: str, input: Any) -> None:
        """
        Called before each attempt of an operation.

        Keep it lightweight (validation, tracing). Errors raised here are
        logged and ignored by the engine.
        """
        return None

    async def after_execute_op(self, operation: str, input: Any, output: Any) -> None:
        """
        Called after each successful attempt of an operation.

        Keep it lightweight (metrics, tracing). Errors raised here are
        logged and ignored by the engine.
        """
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, operations={sorted(self.capabilities)})"


class LegacyProvider(ABC):
    """
    Abstract base class for single-operation providers.

    The name used for logging and filtering is the `name` attribute when
    set, otherwise the class name.
    """

    name: Optional[str] = None

    @abstractmethod
    async def execute(self, input: Any) -> Any:
        """
        Perform the provider's single capability.

        Raises:
            Any exception to signal failure; the engine retries or falls back.
        """
        pass


@dataclass(frozen=True)
class ProviderEntry:
    """
    One provider declaration, in priority order within the engine.

    Attributes:
        provider: MultiOpProvider or LegacyProvider (or a duck-typed equivalent)
        policy: Inline retry policy for this provider
        max_retry: Legacy shorthand, overrides policy.max_retry
        retry_delay_ms: Legacy shorthand, overrides policy.base_delay_ms
        backoff: Legacy shorthand, overrides policy.backoff
    """

    provider: Any
    policy: Optional[RetryPolicy] = None
    max_retry: Optional[int] = None
    retry_delay_ms: Optional[int] = None
    backoff: Optional[BackoffKind] = None
