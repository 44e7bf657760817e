"""
Base exception for fallback-core.

Subpackages define their own exceptions (providers.exceptions,
retry.exceptions) on top of FallbackCoreError so callers can catch any
error raised by the package with a single except clause.
"""


class FallbackCoreError(Exception):
    """Base exception for all fallback-core errors."""
