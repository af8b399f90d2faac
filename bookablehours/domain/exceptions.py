"""
Domain-specific exception hierarchy for the bookablehours application.
"""


class BookableHoursError(Exception):
    """Base class for all application-level errors."""


class InvalidTimezoneError(BookableHoursError):
    """Raised when a timezone identifier cannot be resolved."""


class InvalidRangeError(BookableHoursError):
    """Raised when a requested date range is rejected."""


class RuleValidationError(BookableHoursError):
    """Raised when availability rule records are malformed."""


class RuleSourceError(BookableHoursError):
    """Raised when rule records cannot be read from their source."""
