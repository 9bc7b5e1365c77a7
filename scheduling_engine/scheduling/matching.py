"""
Resource matching: capability, working hours, capacity and conflicts.

A resource is eligible for an interval when it is active, capable of the
requested category, emergency-eligible for emergency requests, working
for the whole interval outside its breaks, under its daily cap, and free
of buffer-expanded conflicts. Eligible resources are ranked by score,
with ties broken by ascending resource id.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta
from typing import Optional

from scheduling_engine.errors import InputError
from scheduling_engine.schemas.booking_schema import (
    BookingRules,
    ExistingBooking,
    InteractionMode,
    Resource,
    Room,
    Urgency,
)
from scheduling_engine.utils import at_clock

logger = logging.getLogger(__name__)

# Scoring weights
RATING_WEIGHT = 20
EXPERIENCE_CAP_YEARS = 20
EXPERIENCE_WEIGHT = 2
PROFESSION_MATCH_BONUS = 30
SPECIALIZATION_BONUS = 10
BOOKING_HISTORY_DIVISOR = 10
BOOKING_HISTORY_CAP = 20


class CapabilityMatcher:
    """Maps request categories to the professions and specializations that serve them."""

    def __init__(self, profession_map: Mapping[str, Iterable[str]]) -> None:
        self._profession_map: dict[str, frozenset[str]] = {
            category.lower(): frozenset(p.lower() for p in professions)
            for category, professions in profession_map.items()
        }

    @property
    def categories(self) -> list[str]:
        return sorted(self._profession_map)

    def require_known_category(self, category: str) -> str:
        """Return the normalized category or raise InputError."""
        normalized = category.lower().strip()
        if normalized not in self._profession_map:
            raise InputError(
                f"Unknown category '{category}'. Known: {self.categories}"
            )
        return normalized

    def matches_profession(self, resource: Resource, category: str) -> bool:
        professions = self._profession_map.get(category.lower().strip(), frozenset())
        return resource.profession.lower() in professions

    def matching_specializations(self, resource: Resource, category: str) -> list[str]:
        needle = category.lower().strip()
        return [s for s in resource.specializations if needle in s.lower()]

    def is_capable(self, resource: Resource, category: str) -> bool:
        return self.matches_profession(resource, category) or bool(
            self.matching_specializations(resource, category)
        )


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Half-open overlap test for [start_a, end_a) and [start_b, end_b)."""
    return start_a < end_b and start_b < end_a


def has_schedule_conflict(
    start: datetime,
    end: datetime,
    bookings: Iterable[ExistingBooking],
    buffer_minutes: int,
) -> bool:
    """Check the interval against non-cancelled bookings expanded by the buffer."""
    buffer = timedelta(minutes=buffer_minutes)
    return any(
        intervals_overlap(start, end, booking.start - buffer, booking.end + buffer)
        for booking in bookings
        if not booking.is_cancelled
    )


class ResourceMatcher:
    """Filters and ranks a resource pool for a requested interval."""

    def __init__(self, rules: BookingRules, capability: CapabilityMatcher) -> None:
        self.rules = rules
        self.capability = capability

    def is_within_working_hours(
        self, resource: Resource, start: datetime, end: datetime
    ) -> bool:
        working_day = resource.working_hours.get(start.weekday())
        if working_day is None or not working_day.is_working:
            return False
        if end.date() != start.date():
            return False
        day_start = at_clock(start, working_day.start)
        day_end = at_clock(start, working_day.end)
        if start < day_start or end > day_end:
            return False
        return not any(
            intervals_overlap(start, end, at_clock(start, b.start), at_clock(start, b.end))
            for b in working_day.breaks
        )

    def is_under_daily_capacity(
        self, resource: Resource, day: datetime, bookings: Iterable[ExistingBooking]
    ) -> bool:
        booked = sum(
            1
            for b in bookings
            if b.resource_id == resource.id
            and not b.is_cancelled
            and b.start.date() == day.date()
        )
        return booked < resource.max_bookings_per_day

    def is_conflict_free(
        self,
        resource: Resource,
        start: datetime,
        end: datetime,
        bookings: Iterable[ExistingBooking],
    ) -> bool:
        if self.rules.allow_double_booking:
            return True
        own = [b for b in bookings if b.resource_id == resource.id]
        return not has_schedule_conflict(start, end, own, self.rules.buffer_minutes)

    def is_resource_available(
        self,
        resource: Resource,
        start: datetime,
        end: datetime,
        bookings: list[ExistingBooking],
    ) -> bool:
        """Time, capacity and conflict checks for one resource."""
        return (
            self.is_within_working_hours(resource, start, end)
            and self.is_under_daily_capacity(resource, start, bookings)
            and self.is_conflict_free(resource, start, end, bookings)
        )

    def is_qualified(self, resource: Resource, category: str, urgency: Urgency) -> bool:
        """Status, capability and emergency checks for one resource."""
        return (
            resource.is_active
            and self.capability.is_capable(resource, category)
            and (urgency != Urgency.EMERGENCY or resource.available_for_emergency)
        )

    def is_eligible(
        self,
        resource: Resource,
        start: datetime,
        end: datetime,
        category: str,
        urgency: Urgency,
        bookings: list[ExistingBooking],
    ) -> bool:
        return self.is_qualified(resource, category, urgency) and self.is_resource_available(
            resource, start, end, bookings
        )

    def score(self, resource: Resource, category: str) -> float:
        score = resource.rating * RATING_WEIGHT
        score += min(resource.experience_years, EXPERIENCE_CAP_YEARS) * EXPERIENCE_WEIGHT
        if self.capability.matches_profession(resource, category):
            score += PROFESSION_MATCH_BONUS
        score += len(self.capability.matching_specializations(resource, category)) * SPECIALIZATION_BONUS
        score += min(resource.total_bookings / BOOKING_HISTORY_DIVISOR, BOOKING_HISTORY_CAP)
        return score

    def rank(self, resources: Iterable[Resource], category: str) -> list[Resource]:
        """Sort by descending score, then ascending id."""
        return sorted(resources, key=lambda r: (-self.score(r, category), r.id))

    def find_available_resources(
        self,
        start: datetime,
        end: datetime,
        category: str,
        urgency: Urgency,
        bookings: Iterable[ExistingBooking],
        resources: Iterable[Resource],
        preferred_id: Optional[int] = None,
    ) -> list[Resource]:
        """Return eligible resources, best first.

        A preferred resource that passes every check is placed first; the
        rest follow in ranked order.
        """
        if end <= start:
            raise InputError(f"End {end.isoformat()} must be after start {start.isoformat()}")
        category = self.capability.require_known_category(category)
        snapshot = list(bookings)

        eligible = [
            r for r in resources
            if self.is_eligible(r, start, end, category, urgency, snapshot)
        ]
        ranked = self.rank(eligible, category)

        if preferred_id is not None:
            preferred = next((r for r in ranked if r.id == preferred_id), None)
            if preferred is not None:
                ranked = [preferred] + [r for r in ranked if r.id != preferred_id]
            else:
                logger.debug("Preferred resource %s is not eligible for %s", preferred_id, start)

        logger.debug(
            "%d resource(s) eligible for %s %s-%s", len(ranked), category, start, end
        )
        return ranked


def find_available_rooms(
    start: datetime,
    end: datetime,
    mode: InteractionMode,
    rooms: Iterable[Room],
    bookings: Iterable[ExistingBooking],
    buffer_minutes: int,
    private_only: bool = True,
) -> list[Room]:
    """Rooms that suit the interaction mode and are free for the interval.

    Private rooms sort first, then rooms with more amenities, then by id.
    """
    if end <= start:
        raise InputError(f"End {end.isoformat()} must be after start {start.isoformat()}")
    snapshot = list(bookings)
    candidates = [
        room for room in rooms
        if room.is_active
        and (room.is_private or not private_only)
        and (room.has_video_conference or not mode.requires_video)
    ]
    free = [
        room for room in candidates
        if not has_schedule_conflict(
            start, end, [b for b in snapshot if b.room_id == room.id], buffer_minutes
        )
    ]
    return sorted(free, key=lambda room: (not room.is_private, -len(room.amenities), room.id))
