"""Tagged success/failure result for service operations.

Expected failures (unknown procedure, bad index, malformed input) travel back
to the caller as values instead of exceptions.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import DomainError

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a service call: exactly one of ``value`` / ``error`` is meaningful."""

    ok: bool
    value: Optional[T] = None
    error: Optional[DomainError] = None

    @classmethod
    def success(cls, value: T) -> "OperationResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: DomainError) -> "OperationResult[T]":
        return cls(ok=False, error=error)

    def unwrap(self) -> T:
        """Return the value, raising the carried error on failure."""
        if not self.ok:
            raise self.error  # type: ignore[misc]
        return self.value  # type: ignore[return-value]
