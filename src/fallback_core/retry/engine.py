"""
Provider orchestration engine.

This module implements FallbackEngine, the single entry point for running
a named operation against a prioritized list of interchangeable providers
with automatic retry, backoff and fallback.

Execution strategies:
    1. Sequential: providers in declaration order, first success wins
    2. Any: all providers concurrently, first success wins
    3. All: all providers concurrently, one outcome per provider

Each provider runs the same attempt loop: invoke, record the failure,
compute the next delay (or honor a retry-after hint), notify hooks, wait,
retry until the resolved policy's max_retry is exhausted.

Usage:
    engine = FallbackEngine([ProviderEntry(s3), ProviderEntry(gcs)], policy=policy_config)
    url = await engine.execute_sequential("upload", payload)
"""

import asyncio
import random
import time
import warnings
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, NoReturn, Optional, Sequence

import structlog
from structlog.contextvars import bound_contextvars

from fallback_core.hooks import EngineHooks, call_hook
from fallback_core.models.enums import ExecutionStrategy
from fallback_core.models.outcomes import AttemptContext, AttemptRecord, ProviderOutcome
from fallback_core.models.policy import EffectivePolicy, PolicyConfig
from fallback_core.monitoring import metrics
from fallback_core.providers import registry
from fallback_core.providers.base import ProviderEntry
from fallback_core.providers.registry import DEFAULT_OPERATION, NormalizedProvider
from fallback_core.retry.backoff import compute_delay_ms, retry_after_ms, sleep_ms
from fallback_core.retry.exceptions import AllProvidersFailedError
from fallback_core.retry.policy import resolve_policy

if TYPE_CHECKING:
    from fallback_core.config import Settings

logger = structlog.get_logger(__name__)


@dataclass
class _LoopResult:
    """Terminal state of one provider's attempt loop."""

    provider: str
    succeeded: bool
    value: Any = None
    attempts: list[AttemptRecord] = field(default_factory=list)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class FallbackEngine:
    """
    Multi-provider orchestrator with retry, backoff and fallback.

    Providers and policy configuration are fixed at construction. The
    engine holds no per-call state: every call builds its own attempt
    records, so one engine can serve concurrent calls.

    Attributes:
        providers: Normalized providers in priority order
        policy: Global policy configuration
        hooks: Lifecycle hooks (all optional, failures swallowed)
        metrics_enabled: Record Prometheus metrics for attempts
    """

    def __init__(
        self,
        providers: Iterable[ProviderEntry | Any],
        policy: Optional[PolicyConfig] = None,
        hooks: Optional[EngineHooks] = None,
        metrics_enabled: bool = True,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the engine.

        Args:
            providers: Provider entries (or bare providers) in priority order
            policy: Global policy configuration (defaults apply when None)
            hooks: Lifecycle hooks
            metrics_enabled: Record Prometheus metrics
            rng: Random source for jitter backoff strategies
        """
        self.providers: list[NormalizedProvider] = registry.normalize_providers(providers)
        self.policy = policy or PolicyConfig()
        self.hooks = hooks or EngineHooks()
        self.metrics_enabled = metrics_enabled
        self._rng = rng
        # Abandoned loops from execute_any; strong refs keep them alive until done
        self._background: set[asyncio.Task] = set()

        logger.info(
            "FallbackEngine initialized",
            providers=self.provider_names,
            per_operation=sorted(self.policy.per_operation),
            per_provider=sorted(self.policy.per_provider),
            metrics_enabled=metrics_enabled,
        )

    @classmethod
    def from_settings(
        cls,
        providers: Iterable[ProviderEntry | Any],
        settings: Optional["Settings"] = None,
        hooks: Optional[EngineHooks] = None,
    ) -> "FallbackEngine":
        """Build an engine whose policy and metrics flag come from Settings."""
        if settings is None:
            from fallback_core.config import settings as default_settings

            settings = default_settings
        return cls(
            providers,
            policy=settings.to_policy_config(),
            hooks=hooks,
            metrics_enabled=settings.PROMETHEUS_ENABLED,
        )

    @property
    def provider_names(self) -> list[str]:
        """Provider names in priority order."""
        return [p.name for p in self.providers]

    def providers_for(
        self, operation: str, provider_names: Optional[Iterable[str]] = None
    ) -> list[str]:
        """Names of the providers eligible for an operation, in priority order."""
        return [p.name for p in self._eligible(operation, provider_names)]

    def policy_for(self, provider_name: str, operation: Optional[str] = None) -> EffectivePolicy:
        """Effective retry policy for a provider/operation pair."""
        for provider in self.providers:
            if provider.name == provider_name:
                return self._resolve(provider, operation)
        raise KeyError(provider_name)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    async def execute_sequential(
        self,
        operation: str,
        input: Any,
        provider_names: Optional[Iterable[str]] = None,
    ) -> Any:
        """
        Run eligible providers one after another until one succeeds.

        A provider's retries are exhausted before the next provider starts.

        Args:
            operation: Operation name
            input: Payload forwarded unchanged to every attempt
            provider_names: Optional allow-list of provider names

        Returns:
            Output of the first successful provider

        Raises:
            AllProvidersFailedError: No eligible provider succeeded
        """
        strategy = ExecutionStrategy.SEQUENTIAL
        with bound_contextvars(operation=operation, strategy=strategy.value):
            candidates = self._eligible(operation, provider_names)
            attempts: list[AttemptRecord] = []

            for provider in candidates:
                result = await self._run_provider(provider, operation, input)
                if result.succeeded:
                    return result.value
                attempts.extend(result.attempts)
                logger.info(
                    f"Provider exhausted, falling back: {provider.name}",
                    provider=provider.name,
                    attempts=len(result.attempts),
                )

            await self._fail_all(operation, input, attempts, strategy)

    async def execute_any(
        self,
        operation: str,
        input: Any,
        provider_names: Optional[Iterable[str]] = None,
    ) -> Any:
        """
        Run eligible providers concurrently and return the first success.

        Loops still running when the result settles are abandoned: they
        stop before their next attempt, and any late success or failure
        only reaches the hooks.

        Raises:
            AllProvidersFailedError: Every eligible provider exhausted its retries
        """
        strategy = ExecutionStrategy.ANY
        with bound_contextvars(operation=operation, strategy=strategy.value):
            candidates = self._eligible(operation, provider_names)
            if not candidates:
                await self._fail_all(operation, input, [], strategy)

            settled = asyncio.Event()
            # tasks copy the current context, so they inherit the bound call context
            tasks = [
                asyncio.create_task(
                    self._run_provider(provider, operation, input, settled),
                    name=f"fallback-any:{operation}:{provider.name}",
                )
                for provider in candidates
            ]
            pending = set(tasks)

            try:
                while pending:
                    done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                    for task in tasks:
                        if task not in done:
                            continue
                        result = task.result()
                        if result.succeeded:
                            settled.set()
                            self._abandon(pending)
                            logger.info(
                                "First success settled the call",
                                provider=result.provider,
                                abandoned=len(pending),
                            )
                            return result.value
            except BaseException:
                # caller cancelled, or a provider raised a non-Exception error
                for task in tasks:
                    task.cancel()
                raise

            attempts = [record for task in tasks for record in task.result().attempts]
            await self._fail_all(operation, input, attempts, strategy)

    async def execute_all(
        self,
        operation: str,
        input: Any,
        provider_names: Optional[Iterable[str]] = None,
    ) -> list[ProviderOutcome]:
        """
        Run eligible providers concurrently and collect every outcome.

        Never fails as a unit once at least one provider is eligible;
        inspect each ProviderOutcome. Blocks until every loop terminates.

        Returns:
            One ProviderOutcome per eligible provider

        Raises:
            AllProvidersFailedError: No provider is eligible (empty attempts)
        """
        strategy = ExecutionStrategy.ALL
        with bound_contextvars(operation=operation, strategy=strategy.value):
            candidates = self._eligible(operation, provider_names)
            if not candidates:
                await self._fail_all(operation, input, [], strategy)

            results = await asyncio.gather(
                *(self._run_provider(provider, operation, input) for provider in candidates)
            )

        outcomes = []
        for result in results:
            if result.succeeded:
                outcomes.append(ProviderOutcome(provider=result.provider, ok=True, value=result.value))
            else:
                outcomes.append(
                    ProviderOutcome(provider=result.provider, ok=False, error=result.attempts[-1].error)
                )
        return outcomes

    # ------------------------------------------------------------------
    # Legacy single-operation API
    # ------------------------------------------------------------------

    async def execute(self, input: Any) -> Any:
        """Deprecated: sequential fallback on the "default" operation."""
        warnings.warn(
            "execute() is deprecated, use execute_sequential() with an operation name",
            DeprecationWarning,
            stacklevel=2,
        )
        return await self.execute_sequential(DEFAULT_OPERATION, input)

    async def execute_with_filter(
        self,
        input: Any,
        provider_names: Sequence[str],
        mode: str = "parallel",
    ) -> Any:
        """
        Deprecated: run the "default" operation on a subset of providers.

        mode "parallel" resolves on the first success, "sequential" falls
        back in priority order.
        """
        warnings.warn(
            "execute_with_filter() is deprecated, pass provider_names to "
            "execute_sequential() or execute_any()",
            DeprecationWarning,
            stacklevel=2,
        )
        if mode == "parallel":
            return await self.execute_any(DEFAULT_OPERATION, input, provider_names)
        if mode == "sequential":
            return await self.execute_sequential(DEFAULT_OPERATION, input, provider_names)
        raise ValueError(f"Unknown mode: {mode!r} (expected 'sequential' or 'parallel')")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _eligible(
        self, operation: str, provider_names: Optional[Iterable[str]]
    ) -> list[NormalizedProvider]:
        return [
            provider
            for provider in registry.filter_by_names(self.providers, provider_names)
            if registry.supports(provider, operation)
        ]

    def _resolve(self, provider: NormalizedProvider, operation: Optional[str]) -> EffectivePolicy:
        return resolve_policy(
            provider_name=provider.name,
            operation=operation,
            global_policy=self.policy,
            provider_inline_policy=provider.policy,
        )

    async def _run_provider(
        self,
        provider: NormalizedProvider,
        operation: str,
        input: Any,
        settled: Optional[asyncio.Event] = None,
    ) -> _LoopResult:
        """Run one provider's attempt loop with `provider` bound in the log context."""
        with bound_contextvars(provider=provider.name):
            return await self._attempt_loop(provider, operation, input, settled)

    async def _attempt_loop(
        self,
        provider: NormalizedProvider,
        operation: str,
        input: Any,
        settled: Optional[asyncio.Event],
    ) -> _LoopResult:
        """
        Attempt loop for one provider.

        Returns on the first success, when retries are exhausted, or (with
        `settled`) when another provider already settled the call.
        """
        policy = self._resolve(provider, operation)
        attempts: list[AttemptRecord] = []
        previous_delay_ms: Optional[int] = None

        for attempt in range(policy.max_retry + 1):
            if settled is not None and settled.is_set():
                logger.debug(
                    "Call already settled, abandoning provider",
                    attempt=attempt,
                )
                break

            started = time.monotonic()
            try:
                output = await registry.invoke(provider, operation, input)
            except Exception as error:
                duration_ms = _elapsed_ms(started)
                attempts.append(AttemptRecord(provider.name, operation, attempt, error))

                delay_ms = compute_delay_ms(
                    policy.backoff,
                    attempt + 1,
                    base_delay_ms=policy.base_delay_ms,
                    max_delay_ms=policy.max_delay_ms,
                    previous_delay_ms=previous_delay_ms,
                    rng=self._rng,
                )
                hint_ms = retry_after_ms(error)
                if hint_ms is not None:
                    delay_ms = hint_ms

                self._record_attempt(provider.name, operation, "failure", duration_ms)
                logger.warning(
                    f"Attempt {attempt + 1}/{policy.max_retry + 1} failed",
                    attempt=attempt,
                    duration_ms=duration_ms,
                    delay_ms=delay_ms,
                    retry_after_hint=hint_ms is not None,
                    error_type=type(error).__name__,
                )
                await call_hook(
                    self.hooks.on_provider_fail,
                    AttemptContext(
                        operation=operation,
                        provider=provider.name,
                        attempt=attempt,
                        duration_ms=duration_ms,
                        delay_ms=delay_ms,
                    ),
                    input,
                    error,
                )

                if attempt < policy.max_retry:
                    if delay_ms > 0:
                        logger.debug(
                            f"Backing off {delay_ms}ms before retry",
                            attempt=attempt,
                            backoff=policy.backoff.value,
                        )
                        self._record_backoff(provider.name, operation, delay_ms)
                        await sleep_ms(delay_ms)
                    previous_delay_ms = delay_ms
                continue

            duration_ms = _elapsed_ms(started)
            self._record_attempt(provider.name, operation, "success", duration_ms)
            await call_hook(
                self.hooks.on_provider_success,
                AttemptContext(
                    operation=operation,
                    provider=provider.name,
                    attempt=attempt,
                    duration_ms=duration_ms,
                ),
                input,
                output,
            )
            return _LoopResult(provider.name, True, output, attempts)

        return _LoopResult(provider.name, False, None, attempts)

    async def _fail_all(
        self,
        operation: str,
        input: Any,
        attempts: list[AttemptRecord],
        strategy: ExecutionStrategy,
    ) -> NoReturn:
        logger.error(
            "All providers failed",
            operation=operation,
            strategy=strategy.value,
            attempts=len(attempts),
            providers_tried=list(dict.fromkeys(a.provider for a in attempts)),
        )
        if self.metrics_enabled:
            metrics.all_providers_failed_total.labels(
                operation=operation, strategy=strategy.value
            ).inc()
        await call_hook(self.hooks.on_all_failed, AttemptContext(operation=operation), input, list(attempts))
        raise AllProvidersFailedError(operation, attempts, strategy=strategy.value)

    def _abandon(self, tasks: Iterable[asyncio.Task]) -> None:
        for task in tasks:
            self._background.add(task)
            task.add_done_callback(self._background.discard)

    def _record_attempt(self, provider: str, operation: str, outcome: str, duration_ms: int) -> None:
        if not self.metrics_enabled:
            return
        metrics.provider_attempts_total.labels(
            provider=provider, operation=operation, outcome=outcome
        ).inc()
        metrics.provider_attempt_latency_seconds.labels(
            provider=provider, operation=operation
        ).observe(duration_ms / 1000)

    def _record_backoff(self, provider: str, operation: str, delay_ms: int) -> None:
        if self.metrics_enabled:
            metrics.backoff_delay_seconds.labels(provider=provider, operation=operation).observe(
                delay_ms / 1000
            )
