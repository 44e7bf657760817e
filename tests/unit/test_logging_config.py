"""
Unit tests for structlog configuration.
"""

import json
import logging

import pytest
import structlog

from fallback_core.config import Settings
from fallback_core.logging_config import configure_logging
from fallback_core.models.enums import BackoffKind
from fallback_core.models.policy import RetryPolicy
from fallback_core.providers.base import ProviderEntry
from fallback_core.retry.engine import FallbackEngine
from fallback_core.retry.exceptions import AllProvidersFailedError


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def make_settings(**overrides) -> Settings:
    values = {
        "APP_NAME": "billing-fallback",
        "APP_VERSION": "2.3.1",
        "LOG_LEVEL": "DEBUG",
        "ENVIRONMENT": "production",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def json_records(output: str) -> list[dict]:
    return [json.loads(line) for line in output.strip().splitlines() if line.startswith("{")]


def test_production_renders_json_with_app_context(capsys):
    configure_logging(make_settings())
    capsys.readouterr()

    structlog.get_logger("fallback_core.test").warning("Attempt failed", attempt=1)

    record = json_records(capsys.readouterr().out)[-1]
    assert record["event"] == "Attempt failed"
    assert record["attempt"] == 1
    assert record["level"] == "warning"
    assert record["app"] == "billing-fallback"
    assert record["app_version"] == "2.3.1"
    assert "timestamp" in record


def test_level_from_settings_filters_lower_records(capsys):
    configure_logging(make_settings(LOG_LEVEL="WARNING"))
    capsys.readouterr()

    structlog.get_logger("fallback_core.test").info("quiet")

    assert capsys.readouterr().out == ""


def test_development_uses_console_renderer(capsys):
    configure_logging(make_settings(ENVIRONMENT="development", LOG_LEVEL="INFO"))

    output = capsys.readouterr().out
    assert "Logging configured" in output
    assert not output.lstrip().startswith("{")
    assert logging.getLogger("asyncio").level == logging.WARNING


@pytest.mark.asyncio
async def test_engine_events_carry_call_context(capsys, make_provider):
    configure_logging(make_settings())
    engine = FallbackEngine(
        [ProviderEntry(make_provider("s3", always_fail=True), policy=RetryPolicy(backoff=BackoffKind.NONE))],
        metrics_enabled=False,
    )
    capsys.readouterr()

    with pytest.raises(AllProvidersFailedError):
        await engine.execute_sequential("send", "payload")

    records = json_records(capsys.readouterr().out)
    failed = next(r for r in records if r["event"].startswith("Attempt 1/1 failed"))
    assert failed["operation"] == "send"
    assert failed["strategy"] == "sequential"
    assert failed["provider"] == "s3"
    assert failed["app"] == "billing-fallback"
    # context is unbound once the call returns
    assert structlog.contextvars.get_contextvars() == {}
