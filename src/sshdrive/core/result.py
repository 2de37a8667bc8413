"""Result type for callers that prefer branching over exception handling."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from sshdrive.core.errors import SyncError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class OperationResult(Generic[T]):
    """Outcome of an orchestrator operation.

    Attributes:
        value: The committed entity (or call result) on success.
        error: The failure on error.
    """

    value: T | None = None
    error: SyncError | None = None

    @property
    def ok(self) -> bool:
        """Return True if the operation succeeded."""
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "OperationResult[T]":
        """Wrap a successful value."""
        return cls(value=value)

    @classmethod
    def failure(cls, error: SyncError) -> "OperationResult[T]":
        """Wrap a failure."""
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
