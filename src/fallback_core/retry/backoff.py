"""
Backoff delay computation.

Pure helpers that compute how long to wait before the next attempt and
extract explicit retry-after hints from provider errors. Delays are
integers in milliseconds.

Strategies (attempt is 1-based, i.e. the retry about to be made):
    none:                0
    linear:              base * attempt
    exponential:         base * 2^(attempt-1)
    full_jitter:         random in [0, exponential]
    equal_jitter:        exponential/2 + random in [0, exponential/2]
    decorrelated_jitter: random in [base, max(base, previous * 3)]
    fibonacci:           base * fib(attempt), fib(1) = fib(2) = 1

All results are clamped into [0, max(base, max_delay)].
"""

import asyncio
import math
import random
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

from fallback_core.models.enums import BackoffKind

DEFAULT_BASE_DELAY_MS = 200
DEFAULT_MAX_DELAY_MS = 5000


def _fibonacci(n: int) -> int:
    a, b = 1, 1
    for _ in range(2, n):
        a, b = b, a + b
    return 1 if n <= 2 else b


def compute_delay_ms(
    kind: BackoffKind | str,
    attempt: int,
    base_delay_ms: Optional[int] = None,
    max_delay_ms: Optional[int] = None,
    previous_delay_ms: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Compute the delay before the next attempt.

    Args:
        kind: Backoff strategy
        attempt: 1-based index of the attempt about to be made
        base_delay_ms: Base delay (default 200)
        max_delay_ms: Delay cap (default 5000, never below base)
        previous_delay_ms: Last delay waited, used by decorrelated_jitter
            (defaults to base)
        rng: Random source for jitter strategies (default: module random)

    Returns:
        Delay in milliseconds
    """
    kind = BackoffKind(kind)
    rand = rng or random
    base = max(0, base_delay_ms if base_delay_ms is not None else DEFAULT_BASE_DELAY_MS)
    cap = max(base, max_delay_ms if max_delay_ms is not None else DEFAULT_MAX_DELAY_MS)
    n = max(1, attempt)
    previous = max(0, previous_delay_ms if previous_delay_ms is not None else base)

    def clamp(value: float) -> int:
        return min(cap, max(0, math.floor(value)))

    if kind is BackoffKind.NONE:
        return 0
    if kind is BackoffKind.LINEAR:
        return clamp(base * n)
    if kind is BackoffKind.EXPONENTIAL:
        return clamp(base * 2 ** (n - 1))
    if kind is BackoffKind.FULL_JITTER:
        return rand.randint(0, clamp(base * 2 ** (n - 1)))
    if kind is BackoffKind.EQUAL_JITTER:
        ceiling = clamp(base * 2 ** (n - 1))
        half = ceiling // 2
        return half + rand.randint(0, ceiling - half)
    if kind is BackoffKind.DECORRELATED_JITTER:
        return clamp(rand.randint(base, max(base, previous * 3)))
    # fibonacci
    return clamp(base * _fibonacci(n))


def _parse_retry_after_header(value: Any) -> Optional[int]:
    """Translate a Retry-After header (seconds or HTTP-date) to milliseconds."""
    text = str(value).strip()
    if not text:
        return None
    try:
        seconds = int(text)
    except ValueError:
        pass
    else:
        return seconds * 1000 if seconds >= 0 else None

    try:
        when = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    remaining = (when - datetime.now(timezone.utc)).total_seconds()
    return max(0, math.floor(remaining * 1000))


def retry_after_ms(error: BaseException) -> Optional[int]:
    """
    Extract an explicit retry-after hint from a provider error.

    Checked in order:
        1. a numeric, positive `retry_after_ms` attribute
        2. a `response.headers["retry-after"]` value (httpx-style errors)

    Returns:
        Hint in milliseconds, or None if the error carries no usable hint
    """
    hint = getattr(error, "retry_after_ms", None)
    if hint is not None and not isinstance(hint, bool):
        try:
            value = float(hint)
        except (TypeError, ValueError):
            value = math.nan
        if math.isfinite(value) and value > 0:
            return math.floor(value)

    response = getattr(error, "response", None)
    headers = getattr(response, "headers", None)
    if headers is None:
        return None
    try:
        raw = headers.get("retry-after")
        if raw is None:
            raw = headers.get("Retry-After")
    except AttributeError:
        return None
    if raw is None:
        return None
    return _parse_retry_after_header(raw)


async def sleep_ms(delay_ms: int) -> None:
    """Suspend for delay_ms milliseconds. Zero or negative delays do not suspend."""
    if delay_ms > 0:
        await asyncio.sleep(delay_ms / 1000)
