"""
Domain-specific exception hierarchy for the working days application.
"""


class WorkingDaysError(Exception):
    """Base class for all application-level errors."""


class InvalidParametersError(WorkingDaysError):
    """Raised when request parameters are missing, malformed or out of range."""


class CalendarFetchError(WorkingDaysError):
    """Raised when the remote holiday list cannot be fetched or parsed."""


class ComputationError(WorkingDaysError):
    """Raised when an unexpected fault interrupts a business-time calculation."""
