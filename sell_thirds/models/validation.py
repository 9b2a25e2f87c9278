"""
Validation Data Models

Purpose:
--------
Result types produced by the validators package.

Data Models:
------------
- ValidationErrorCode: machine-readable error category
- FieldValidationError: one violated rule on one input field
- ValidationResult: all errors collected for one input
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ValidationErrorCode(str, Enum):
    """Validation error codes for programmatic handling."""

    REQUIRED = "required"
    INVALID_FORMAT = "invalid_format"
    OUT_OF_RANGE = "out_of_range"
    INSUFFICIENT_SHARES = "insufficient_shares"
    DUPLICATE_TICKER = "duplicate_ticker"


class FieldValidationError(BaseModel):
    """
    Single field validation failure.

    Example:
    --------
    >>> FieldValidationError(
    ...     field="shares_sold",
    ...     message="Cannot sell 300 shares. Only 200 shares remaining.",
    ...     code=ValidationErrorCode.INSUFFICIENT_SHARES,
    ... )
    """

    field: str = Field(..., description="Input field that failed")
    message: str = Field(..., description="Human-readable error message")
    code: ValidationErrorCode = Field(..., description="Error category")

    model_config = ConfigDict(frozen=True)


class ValidationResult(BaseModel):
    """
    Outcome of validating one input.

    Validators accumulate every applicable error rather than stopping at
    the first, so is_valid is derived from the error list.
    """

    errors: list[FieldValidationError] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, field: str, message: str, code: ValidationErrorCode) -> None:
        self.errors.append(FieldValidationError(field=field, message=message, code=code))

    def errors_for(self, field: str) -> list[FieldValidationError]:
        """Errors reported against one field."""
        return [e for e in self.errors if e.field == field]
