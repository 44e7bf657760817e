"""
Orchestration exceptions.

Only the aggregate failure crosses the engine boundary. Individual
attempt errors are recorded as AttemptRecord entries and carried by
AllProvidersFailedError.
"""

from typing import TYPE_CHECKING, Optional, Sequence

from fallback_core.exceptions import FallbackCoreError

if TYPE_CHECKING:
    from fallback_core.models.outcomes import AttemptRecord


class AllProvidersFailedError(FallbackCoreError):
    """
    Raised when no eligible provider succeeded.

    An empty `attempts` list means no provider was eligible for the
    operation (name filter and capability check left nothing to try).

    Attributes:
        operation: Operation that failed
        attempts: Every failed attempt, in provider-then-attempt order
        strategy: Strategy that raised the error ("sequential", "any", "all")
    """

    def __init__(
        self,
        operation: str,
        attempts: Sequence["AttemptRecord"],
        strategy: Optional[str] = None,
    ) -> None:
        self.operation = operation
        self.attempts = list(attempts)
        self.strategy = strategy
        super().__init__(f'All providers failed for operation "{operation}"')

    @property
    def last_error(self) -> Optional[BaseException]:
        """Error of the last recorded attempt, if any."""
        return self.attempts[-1].error if self.attempts else None

    @property
    def providers_tried(self) -> list[str]:
        """Distinct provider names in the order they first failed."""
        return list(dict.fromkeys(record.provider for record in self.attempts))
