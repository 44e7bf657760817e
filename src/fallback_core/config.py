"""
Configuration settings for fallback-core.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development. Per-operation and per-provider
policies are JSON objects, e.g.:

    PER_OPERATION_POLICIES='{"upload": {"max_retry": 2, "backoff": "exponential"}}'
"""

from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from fallback_core.models.enums import BackoffKind
from fallback_core.models.policy import PolicyConfig, RetryPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "fallback-core"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # "production" switches logs to JSON

    # === Default Retry Policy ===
    DEFAULT_MAX_RETRY: int = 0
    DEFAULT_BASE_DELAY_MS: int = 200
    DEFAULT_MAX_DELAY_MS: int = 5000
    DEFAULT_BACKOFF: BackoffKind = BackoffKind.FULL_JITTER

    # === Policy Overrides ===
    PER_OPERATION_POLICIES: dict[str, dict[str, Any]] = {}
    PER_PROVIDER_POLICIES: dict[str, dict[str, Any]] = {}

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    def to_policy_config(self) -> PolicyConfig:
        """Build the PolicyConfig consumed by FallbackEngine."""
        return PolicyConfig(
            default=RetryPolicy(
                max_retry=self.DEFAULT_MAX_RETRY,
                base_delay_ms=self.DEFAULT_BASE_DELAY_MS,
                max_delay_ms=self.DEFAULT_MAX_DELAY_MS,
                backoff=self.DEFAULT_BACKOFF,
            ),
            per_operation={
                name: RetryPolicy(**policy) for name, policy in self.PER_OPERATION_POLICIES.items()
            },
            per_provider={
                name: RetryPolicy(**policy) for name, policy in self.PER_PROVIDER_POLICIES.items()
            },
        )


# Global settings instance
settings = Settings()
