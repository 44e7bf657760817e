"""
Enumerations for fallback-core data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class BackoffKind(str, Enum):
    """
    Backoff strategy used to compute the wait before the next attempt.

    Jitter variants randomize the delay to avoid synchronized retries
    across callers. Every variant except NONE is capped by max_delay_ms.
    """

    NONE = "none"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    FULL_JITTER = "full_jitter"
    EQUAL_JITTER = "equal_jitter"
    DECORRELATED_JITTER = "decorrelated_jitter"
    FIBONACCI = "fibonacci"


class ExecutionStrategy(str, Enum):
    """Execution strategy used by the engine for one call."""

    SEQUENTIAL = "sequential"
    ANY = "any"
    ALL = "all"
