"""
In-memory booking ledger: the reference commit boundary for the engine.

The engine validates against whatever snapshot it is handed, so two
concurrent attempts can both look conflict-free. The ledger closes that
race: commit() re-checks the buffer-expanded conflict rule against the
latest state under a lock, and optionally rejects commits validated
against an older snapshot version.

In production this role belongs to the persistence layer (a unique or
exclusion constraint, or a serializable check-and-insert transaction).
"""

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Optional

from scheduling_engine.cache import RateLimiter
from scheduling_engine.errors import (
    BookingConflictError,
    InputError,
    RateLimitExceededError,
    StaleSnapshotError,
)
from scheduling_engine.schemas.booking_schema import (
    BookingRules,
    BookingStatus,
    ExistingBooking,
    Resource,
)
from scheduling_engine.scheduling.matching import has_schedule_conflict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    """Bookings as of ``version``."""
    version: int
    bookings: list[ExistingBooking]


class BookingLedger:
    """Thread-safe store of committed bookings for one vertical."""

    def __init__(self, rules: BookingRules, rate_limiter: Optional[RateLimiter] = None) -> None:
        self.rules = rules
        self.rate_limiter = rate_limiter
        self._bookings: dict[int, ExistingBooking] = {}
        self._next_id = 1
        self._version = 0
        self._lock = Lock()

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self, resource_id: Optional[int] = None) -> LedgerSnapshot:
        with self._lock:
            bookings = [
                b for b in self._bookings.values()
                if resource_id is None or b.resource_id == resource_id
            ]
            return LedgerSnapshot(version=self._version, bookings=bookings)

    def commit(
        self,
        booking: ExistingBooking,
        expected_version: Optional[int] = None,
        resource: Optional[Resource] = None,
    ) -> ExistingBooking:
        """Persist a booking after re-checking it against the latest state.

        When ``resource`` is given, its daily booking cap is re-checked too;
        this holds even for verticals that allow double booking.

        Raises:
            InputError: If the booking interval is empty or ``resource`` is
                not the booked resource.
            RateLimitExceededError: If the client exceeded its commit attempts.
            StaleSnapshotError: If ``expected_version`` is given and outdated.
            BookingConflictError: If the resource is already taken or fully
                booked for the day.
        """
        if booking.end <= booking.start:
            raise InputError("Booking end must be after its start")
        if resource is not None and resource.id != booking.resource_id:
            raise InputError(
                f"Booking is assigned to resource {booking.resource_id}, not {resource.id}"
            )

        if self.rate_limiter is not None and booking.client_id is not None:
            if not self.rate_limiter.hit(booking.client_id):
                raise RateLimitExceededError(
                    f"Too many booking attempts for client {booking.client_id}"
                )

        with self._lock:
            if expected_version is not None and expected_version != self._version:
                raise StaleSnapshotError(
                    f"Snapshot version {expected_version} is stale (current {self._version})"
                )

            own = [b for b in self._bookings.values() if b.resource_id == booking.resource_id]
            if resource is not None:
                booked = sum(
                    1 for b in own
                    if not b.is_cancelled and b.start.date() == booking.start.date()
                )
                if booked >= resource.max_bookings_per_day:
                    raise BookingConflictError(
                        f"Resource {resource.id} is fully booked on {booking.start.date()}"
                    )

            if not self.rules.allow_double_booking:
                if has_schedule_conflict(booking.start, booking.end, own, self.rules.buffer_minutes):
                    logger.info(
                        "Commit rejected: resource %s already booked near %s",
                        booking.resource_id, booking.start,
                    )
                    raise BookingConflictError(
                        f"Resource {booking.resource_id} is already booked "
                        f"around {booking.start.isoformat()}"
                    )

            stored = booking.model_copy(update={
                "id": self._next_id,
                "status": BookingStatus.CONFIRMED,
            })
            self._bookings[stored.id] = stored
            self._next_id += 1
            self._version += 1

        logger.info(
            "Booking %s committed for resource %s at %s", stored.id, stored.resource_id, stored.start
        )
        return stored

    def cancel(self, booking_id: int) -> bool:
        """Mark a booking cancelled; it stops counting toward conflicts."""
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                return False
            self._bookings[booking_id] = booking.model_copy(
                update={"status": BookingStatus.CANCELLED}
            )
            self._version += 1
        logger.info("Booking cancelled: %s", booking_id)
        return True

    def get(self, booking_id: int) -> Optional[ExistingBooking]:
        with self._lock:
            return self._bookings.get(booking_id)

    def reset(self) -> None:
        """Clear all bookings. Used by test fixtures for isolation."""
        with self._lock:
            self._bookings.clear()
            self._next_id = 1
            self._version = 0
