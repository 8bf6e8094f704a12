"""Exception types raised by the scheduler."""

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for all scheduler errors."""

    pass


class ValidationError(SchedulerError, ValueError):
    """Raised when caller-supplied input violates a precondition."""

    pass


class DateRangeInvertedError(ValidationError):
    """Raised when the start date of a range is after its end date."""

    pass


class DateRangeTooLargeError(ValidationError):
    """Raised when a generation range spans more days than allowed."""

    pass


class UnknownRoleError(ValidationError):
    """Raised when a role name does not match any staff role."""

    pass


class DependencyUnavailable(SchedulerError, RuntimeError):
    """Raised when the staff, absence or shift store cannot be reached."""

    pass
