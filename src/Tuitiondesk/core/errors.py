class TuitionError(Exception):
    """Base class for errors raised by Tuitiondesk."""

    pass


class ValidationError(TuitionError, ValueError):
    """Raised when input is rejected before any write."""

    pass


class ScopeError(TuitionError):
    """Raised when a teacher acts on a record it does not own."""

    pass
