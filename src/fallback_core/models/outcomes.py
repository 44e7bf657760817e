"""
Attempt and outcome records.

These frozen dataclasses capture what happened during one orchestrated
call: every failed attempt (AttemptRecord), the context passed to
lifecycle hooks (AttemptContext), and the per-provider result of the
collect-all strategy (ProviderOutcome).
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class AttemptRecord:
    """
    One failed provider attempt.

    Attributes:
        provider: Provider name
        operation: Operation name
        attempt: Attempt index (0 = initial attempt)
        error: Exception raised by the attempt
    """

    provider: str
    operation: str
    attempt: int
    error: BaseException

    def __post_init__(self) -> None:
        if self.attempt < 0:
            raise ValueError("attempt must be >= 0")


@dataclass(frozen=True)
class AttemptContext:
    """
    Context passed to the success/failure/all-failed hooks.

    delay_ms is only set for failures and holds the wait scheduled before
    the next attempt (also reported when no further attempt follows).
    For the all-failed hook only `operation` is meaningful.
    """

    operation: str
    provider: Optional[str] = None
    attempt: int = 0
    duration_ms: int = 0
    delay_ms: Optional[int] = None


@dataclass(frozen=True)
class ProviderOutcome:
    """Per-provider result of the collect-all strategy."""

    provider: str
    ok: bool
    value: Any = None
    error: Optional[BaseException] = None

    def __post_init__(self) -> None:
        if self.ok and self.error is not None:
            raise ValueError("successful outcome cannot carry an error")
