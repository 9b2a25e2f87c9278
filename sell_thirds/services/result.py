"""
Service Result Types.

Tagged success/failure results returned by PositionService operations.
A failed result carries the TrackerError subclass describing what went
wrong, so callers branch on error type (validation vs not-found vs
storage) instead of catching exceptions.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from sell_thirds.exceptions import (
    PositionNotFoundError,
    StorageError,
    TrackerError,
    ValidationFailedError,
)
from sell_thirds.models.position import Position
from sell_thirds.models.trade import Trade

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Result of a PositionService operation.

    Attributes:
        success: Whether the operation completed
        value: Operation output (None on failure, and for operations with no output)
        error: Error describing the failure (None on success)
    """

    success: bool
    value: T | None = None
    error: TrackerError | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "ServiceResult[T]":
        """Create a successful result."""
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: TrackerError) -> "ServiceResult[T]":
        """Create a failed result."""
        return cls(success=False, error=error)

    @property
    def is_validation_error(self) -> bool:
        return isinstance(self.error, ValidationFailedError)

    @property
    def is_not_found(self) -> bool:
        return isinstance(self.error, PositionNotFoundError)

    @property
    def is_storage_error(self) -> bool:
        return isinstance(self.error, StorageError)

    def unwrap(self) -> T | None:
        """
        Return the value, raising the carried error on failure.

        Raises:
            TrackerError: The error held by a failed result
        """
        if not self.success:
            assert self.error is not None
            raise self.error
        return self.value


@dataclass(frozen=True)
class TradeRecordResult:
    """Position after the sale together with the trade that was recorded."""

    position: Position
    trade: Trade
