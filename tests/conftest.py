"""Shared test fixtures and configuration for all tests.

This conftest.py provides scripted providers and settings used across
unit and integration tests.
"""

import asyncio
import time
from functools import partial
from typing import Any, Optional

import pytest

from fallback_core.config import Settings
from fallback_core.providers.base import LegacyProvider, MultiOpProvider


class ProviderError(Exception):
    """Error raised by scripted providers."""

    def __init__(self, message: str, retry_after_ms: Optional[Any] = None):
        super().__init__(message)
        if retry_after_ms is not None:
            self.retry_after_ms = retry_after_ms


class ScriptedProvider(MultiOpProvider):
    """
    Multi-operation provider whose behavior is scripted per test.

    The first `fail_times` attempts of each operation fail (every attempt
    when `always_fail`), the rest succeed after `delay_s` seconds.
    Every start/end is appended to `events` as (name, "start"|"end", t).
    """

    def __init__(
        self,
        name: str,
        operations: tuple[str, ...] = ("send",),
        fail_times: int = 0,
        always_fail: bool = False,
        delay_s: float = 0.0,
        result: Any = None,
        retry_after_ms: Optional[Any] = None,
        events: Optional[list] = None,
    ):
        self.name = name
        self.operations = operations
        self.fail_times = fail_times
        self.always_fail = always_fail
        self.delay_s = delay_s
        self.result = result
        self.retry_after_ms = retry_after_ms
        self.events = events if events is not None else []
        self.calls: list[tuple[str, Any]] = []

    @property
    def capabilities(self):
        return {operation: partial(self._run, operation) for operation in self.operations}

    def call_count(self, operation: Optional[str] = None) -> int:
        return sum(1 for op, _ in self.calls if operation is None or op == operation)

    async def _run(self, operation: str, input: Any) -> Any:
        self.calls.append((operation, input))
        attempt = self.call_count(operation) - 1
        self.events.append((self.name, "start", time.monotonic()))
        try:
            if self.delay_s:
                await asyncio.sleep(self.delay_s)
            if self.always_fail or attempt < self.fail_times:
                raise ProviderError(
                    f"{self.name} failed attempt {attempt}", retry_after_ms=self.retry_after_ms
                )
            return self.result if self.result is not None else f"{self.name}:{operation}:{input}"
        finally:
            self.events.append((self.name, "end", time.monotonic()))


class EchoLegacyProvider(LegacyProvider):
    """Legacy single-operation provider that echoes its input."""

    def __init__(self, name: Optional[str] = "echo", fail: bool = False):
        self.name = name
        self.fail = fail
        self.calls: list[Any] = []

    async def execute(self, input: Any) -> Any:
        self.calls.append(input)
        if self.fail:
            raise ProviderError(f"{self.name} failed")
        return f"echo:{input}"


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing."""
    return Settings(
        APP_NAME="fallback-core (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        DEFAULT_MAX_RETRY=0,
        DEFAULT_BASE_DELAY_MS=1,
        DEFAULT_MAX_DELAY_MS=5,
        DEFAULT_BACKOFF="none",
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def make_provider():
    """Factory fixture to create ScriptedProvider instances.

    Usage:
        def test_something(make_provider):
            provider = make_provider("primary", always_fail=True)
    """
    def _create(name: str, **kwargs: Any) -> ScriptedProvider:
        return ScriptedProvider(name, **kwargs)

    return _create


@pytest.fixture
def make_legacy_provider():
    """Factory fixture to create EchoLegacyProvider instances."""
    def _create(name: Optional[str] = "echo", fail: bool = False) -> EchoLegacyProvider:
        return EchoLegacyProvider(name=name, fail=fail)

    return _create


@pytest.fixture
def event_log() -> list:
    """Shared start/end log for providers that must be ordered against each other."""
    return []
