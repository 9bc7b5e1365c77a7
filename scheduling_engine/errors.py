"""Exception types raised by the scheduling engine and its commit boundary.

Business-rule problems with a booking request are never raised; they are
reported as errors and warnings on a ValidationResult. The exceptions
here mark caller defects (InputError) or a lost race at commit time.
"""


class SchedulingError(Exception):
    """Base class for all scheduling engine exceptions."""


class InputError(SchedulingError, ValueError):
    """Raised for structurally invalid input: bad durations, intervals or categories."""


class BookingConflictError(SchedulingError):
    """Raised when a commit would overlap an existing booking on the same resource."""


class StaleSnapshotError(SchedulingError):
    """Raised when a commit was validated against an outdated bookings snapshot."""


class RateLimitExceededError(SchedulingError):
    """Raised when a client exceeds the allowed number of commit attempts."""
