"""
Provider registry exceptions.
"""

from fallback_core.exceptions import FallbackCoreError


class UnsupportedOperationError(FallbackCoreError):
    """
    Raised when a provider is invoked for an operation it does not declare.

    The engine filters providers by capability before invoking them, so
    this only surfaces when the registry is used directly.
    """

    def __init__(self, provider: str, operation: str) -> None:
        self.provider = provider
        self.operation = operation
        super().__init__(f'Provider "{provider}" does not support operation "{operation}"')
