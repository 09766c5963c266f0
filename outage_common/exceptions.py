"""
Exceptions raised by the outage domain layer.

Callers can catch OutageError to handle any domain failure, or the
specific subclasses below.
"""


class OutageError(Exception):
    """Base class for outage domain errors."""


class InvalidInputError(OutageError, ValueError):
    """
    Raised when a caller passes a value the domain cannot accept.

    Examples: constructing an outage from a scalar, a field value that
    cannot be cast to its type, a non-positive reference time.
    """


class OutageStateError(OutageError):
    """Raised when an operation is not allowed in the outage's current stage."""
