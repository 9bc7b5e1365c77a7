from scheduling_engine.engine import SchedulingEngine
from scheduling_engine.errors import (
    BookingConflictError,
    InputError,
    RateLimitExceededError,
    SchedulingError,
    StaleSnapshotError,
)
from scheduling_engine.ledger import BookingLedger
from scheduling_engine.verticals import create_engine, get_registered_verticals, get_vertical

__all__ = [
    "SchedulingEngine",
    "BookingLedger",
    "create_engine",
    "get_vertical",
    "get_registered_verticals",
    "SchedulingError",
    "InputError",
    "BookingConflictError",
    "StaleSnapshotError",
    "RateLimitExceededError",
]
