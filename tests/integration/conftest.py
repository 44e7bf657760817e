"""Integration test fixtures (real timing, HTTP-backed providers).

Integration tests run the engine with real asyncio scheduling and real
backoff waits. HTTP providers talk to an in-process httpx.MockTransport,
so no external service is required.
"""

from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio

from fallback_core.hooks import EngineHooks
from fallback_core.providers.base import MultiOpProvider
from fallback_core.retry.engine import FallbackEngine


class HttpProvider(MultiOpProvider):
    """Provider whose "send" operation POSTs to a mocked HTTP endpoint."""

    def __init__(self, name: str, handler: Callable[[httpx.Request], httpx.Response]):
        self.name = name
        self.client = httpx.AsyncClient(
            base_url=f"https://{name}.example.com",
            transport=httpx.MockTransport(handler),
        )

    @property
    def capabilities(self):
        return {"send": self.send}

    async def send(self, input: Any) -> dict:
        response = await self.client.post("/messages", json={"body": input})
        response.raise_for_status()
        return response.json()


class HookRecorder:
    """Collects every hook notification as (kind, provider, attempt)."""

    def __init__(self):
        self.events: list[tuple[str, Any, int]] = []

    def hooks(self) -> EngineHooks:
        return EngineHooks(
            on_provider_success=lambda ctx, input, output: self.events.append(
                ("success", ctx.provider, ctx.attempt)
            ),
            on_provider_fail=lambda ctx, input, error: self.events.append(
                ("fail", ctx.provider, ctx.attempt)
            ),
            on_all_failed=lambda ctx, input, attempts: self.events.append(
                ("all_failed", None, len(attempts))
            ),
        )

    def of_kind(self, kind: str) -> list[tuple[str, Any, int]]:
        return [event for event in self.events if event[0] == kind]


@pytest.fixture
def recorder() -> HookRecorder:
    return HookRecorder()


@pytest.fixture
def real_engine(recorder):
    """Factory fixture for engines with real backoff waits and recording hooks."""
    def _create(providers, policy=None) -> FallbackEngine:
        return FallbackEngine(providers, policy=policy, hooks=recorder.hooks(), metrics_enabled=False)

    return _create


@pytest_asyncio.fixture
async def make_http_provider():
    """Factory fixture for HttpProvider; clients are closed after the test."""
    created: list[HttpProvider] = []

    def _create(name: str, handler: Callable[[httpx.Request], httpx.Response]) -> HttpProvider:
        provider = HttpProvider(name, handler)
        created.append(provider)
        return provider

    yield _create

    for provider in created:
        await provider.client.aclose()
