"""
Domain-specific exception hierarchy for timeslot generation.

Every concrete error also derives from ``ValueError`` so callers that only
care about "bad input" can catch that instead of the individual kinds.
"""

from typing import Any, Optional


class TimeslotError(Exception):
    """Base class for all application-level errors."""

    def __init__(
        self,
        message: str,
        *,
        value: Any = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.value = value
        self.field = field


class ValidationError(TimeslotError, ValueError):
    """Raised when a generation config is rejected before any date resolution."""


class InvalidFormatError(TimeslotError, ValueError):
    """Raised when a string value does not match any recognised shape."""


class FieldRangeError(TimeslotError, ValueError):
    """Raised when a recognised shape carries a field outside its valid range."""


class MissingContextError(TimeslotError, ValueError):
    """Raised when a time is given but no calendar date is available for it."""


class InvalidRangeError(TimeslotError, ValueError):
    """Raised when a range does not end strictly after it starts."""


class InvalidInputError(TimeslotError, ValueError):
    """Raised when a value is not a usable instant or has an unsupported type."""
