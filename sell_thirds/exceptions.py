"""
Position Tracker Exception Classes

Custom exception hierarchy for the sell-in-thirds position tracker.
Calculation functions raise these directly; PositionService catches them
and hands them back inside a failed ServiceResult so callers can react
to each condition separately.

Hierarchy:
----------
TrackerError
├── InvalidArgumentError      calculation precondition violated
├── InvalidStateError         degenerate position state (e.g. zero cost basis)
├── ValidationFailedError     one or more business-rule violations
├── PositionNotFoundError     referenced position does not exist
└── StorageError
    ├── StorageUnavailableError
    ├── StorageQuotaExceededError
    └── CorruptedDataError    read-path only, logged and recovered
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional
from uuid import UUID

if TYPE_CHECKING:
    from sell_thirds.models.validation import ValidationResult


class TrackerError(Exception):
    """Base exception for all position tracker errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize tracker error.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidArgumentError(TrackerError):
    """Raised when a calculation precondition is violated."""

    def __init__(self, argument: str, value: object, message: Optional[str] = None):
        if message is None:
            message = f"Invalid value for {argument}: {value!r}"

        super().__init__(message, details={"argument": argument, "value": str(value)})
        self.argument = argument
        self.value = value


class InvalidStateError(TrackerError):
    """Raised when a position is in a state the calculations cannot handle."""


class ValidationFailedError(TrackerError):
    """Raised when input fails business-rule validation. Carries every field error."""

    def __init__(self, result: ValidationResult, message: Optional[str] = None):
        """
        Initialize validation failure.

        Args:
            result: ValidationResult holding all collected field errors
            message: Optional custom message
        """
        if message is None:
            message = "Validation failed: " + ", ".join(e.message for e in result.errors)

        super().__init__(
            message,
            details={
                "errors": [
                    {"field": e.field, "message": e.message, "code": e.code.value}
                    for e in result.errors
                ]
            },
        )
        self.result = result

    @property
    def errors(self):
        return self.result.errors


class PositionNotFoundError(TrackerError):
    """Raised when a position cannot be found."""

    def __init__(self, position_id: UUID | str, message: Optional[str] = None):
        if message is None:
            message = f"Position not found: {position_id}"

        super().__init__(message, details={"position_id": str(position_id)})
        self.position_id = position_id


class StorageError(TrackerError):
    """Base class for store collaborator failures."""


class StorageUnavailableError(StorageError):
    """Raised when the backing store cannot be read or written."""

    def __init__(self, operation: str, message: Optional[str] = None):
        if message is None:
            message = f"Storage is not available (operation: {operation})"

        super().__init__(message, details={"operation": operation})
        self.operation = operation


class StorageQuotaExceededError(StorageError):
    """Raised when a write would exceed the store's quota."""

    def __init__(
        self,
        operation: str,
        required_bytes: int | None = None,
        quota_bytes: int | None = None,
        message: Optional[str] = None,
    ):
        """
        Initialize quota exceeded error.

        Args:
            operation: Store operation that hit the quota (e.g. "save positions")
            required_bytes: Total bytes the store would hold after the write
            quota_bytes: Configured quota
            message: Optional custom message
        """
        if message is None:
            message = f"Storage quota exceeded while trying to {operation}. Please clear some data."

        super().__init__(
            message,
            details={
                "operation": operation,
                "required_bytes": required_bytes,
                "quota_bytes": quota_bytes,
            },
        )
        self.operation = operation
        self.required_bytes = required_bytes
        self.quota_bytes = quota_bytes


class CorruptedDataError(StorageError):
    """Stored collection could not be parsed. Never raised past the store's read path."""

    def __init__(self, collection: str, reason: str):
        super().__init__(
            f"Stored {collection} data is corrupted: {reason}",
            details={"collection": collection, "reason": reason},
        )
        self.collection = collection
        self.reason = reason
