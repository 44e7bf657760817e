"""Unit test fixtures (mocks and stubs).

Provides mock hooks and a quiet engine factory for testing without
real backoff waits or metrics.
"""

from unittest.mock import AsyncMock, patch

import pytest

from fallback_core.hooks import EngineHooks
from fallback_core.retry.engine import FallbackEngine


@pytest.fixture
def mock_hooks() -> EngineHooks:
    """EngineHooks whose three hooks are AsyncMocks."""
    return EngineHooks(
        on_provider_success=AsyncMock(name="on_provider_success"),
        on_provider_fail=AsyncMock(name="on_provider_fail"),
        on_all_failed=AsyncMock(name="on_all_failed"),
    )


@pytest.fixture
def mock_sleep():
    """Patch the engine's backoff sleep so retries never actually wait."""
    with patch("fallback_core.retry.engine.sleep_ms", new=AsyncMock()) as mocked:
        yield mocked


@pytest.fixture
def make_engine(mock_hooks):
    """Factory fixture to create a FallbackEngine with mock hooks and metrics off.

    Usage:
        def test_something(make_engine, make_provider):
            engine = make_engine([make_provider("a")])
    """
    def _create(providers, policy=None, hooks=None, **kwargs) -> FallbackEngine:
        kwargs.setdefault("metrics_enabled", False)
        return FallbackEngine(
            providers,
            policy=policy,
            hooks=hooks if hooks is not None else mock_hooks,
            **kwargs,
        )

    return _create
