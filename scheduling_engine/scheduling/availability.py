"""
Availability calculator: turns a date, a duration and a business-hours
table into an ordered sequence of candidate slots.

Slots are recomputed on every call. Resource-level feasibility is decided
later by the resource matcher, so a base slot is only unavailable when it
falls outside the business day.
"""

import logging
from collections.abc import Iterator
from datetime import datetime, timedelta
from typing import Optional

from scheduling_engine.errors import InputError
from scheduling_engine.schemas.booking_schema import BusinessDay, BusinessHours, Slot, Urgency
from scheduling_engine.utils import at_clock

logger = logging.getLogger(__name__)

STANDARD_BUSINESS_HOURS: BusinessHours = {
    0: BusinessDay(is_open=True, open="08:00", close="18:00"),
    1: BusinessDay(is_open=True, open="08:00", close="18:00"),
    2: BusinessDay(is_open=True, open="08:00", close="18:00"),
    3: BusinessDay(is_open=True, open="08:00", close="18:00"),
    4: BusinessDay(is_open=True, open="08:00", close="18:00"),
    5: BusinessDay(is_open=True, open="09:00", close="15:00"),
    6: BusinessDay(is_open=False),
}

EMERGENCY_BUSINESS_HOURS: BusinessHours = {
    0: BusinessDay(is_open=True, open="06:00", close="22:00"),
    1: BusinessDay(is_open=True, open="06:00", close="22:00"),
    2: BusinessDay(is_open=True, open="06:00", close="22:00"),
    3: BusinessDay(is_open=True, open="06:00", close="22:00"),
    4: BusinessDay(is_open=True, open="06:00", close="22:00"),
    5: BusinessDay(is_open=True, open="08:00", close="20:00"),
    6: BusinessDay(is_open=True, open="10:00", close="18:00"),
}


def select_business_hours(
    urgency: Urgency, standard: BusinessHours, emergency: BusinessHours
) -> BusinessHours:
    """Emergency requests use the extended table, everything else the standard one."""
    return emergency if urgency == Urgency.EMERGENCY else standard


def business_window(day: datetime, hours: BusinessHours) -> Optional[tuple[datetime, datetime]]:
    """Return the open interval for ``day``, or None when the business is closed."""
    business_day = hours.get(day.weekday())
    if business_day is None or not business_day.is_open:
        return None
    opens = at_clock(day, business_day.open)
    closes = at_clock(day, business_day.close)
    if closes <= opens:
        return None
    return opens, closes


def is_business_open(
    moment: datetime,
    urgency: Urgency,
    standard: BusinessHours,
    emergency: BusinessHours,
) -> bool:
    """Check whether a booking may start at ``moment`` for the given urgency.

    A day marked closed still counts as open for emergencies.
    """
    hours = select_business_hours(urgency, standard, emergency)
    window = business_window(moment, hours)
    if window is None:
        return urgency == Urgency.EMERGENCY
    opens, closes = window
    return opens <= moment < closes


def generate_base_slots(
    day: datetime,
    duration_minutes: int,
    hours: BusinessHours,
    step_minutes: Optional[int] = None,
) -> Iterator[Slot]:
    """Yield candidate slots of ``duration_minutes`` across the business day.

    Slots start at opening time and advance by ``step_minutes`` (the duration
    itself by default). The last slot ends no later than closing time.
    """
    if duration_minutes <= 0:
        raise InputError(f"Duration must be positive, got {duration_minutes}")
    step = step_minutes if step_minutes is not None else duration_minutes
    if step <= 0:
        raise InputError(f"Slot step must be positive, got {step}")

    window = business_window(day, hours)
    if window is None:
        logger.debug("Closed on %s, no slots generated", day.date())
        return iter(())
    return _iter_slots(window[0], window[1], duration_minutes, step)


def _iter_slots(
    opens: datetime, closes: datetime, duration_minutes: int, step_minutes: int
) -> Iterator[Slot]:
    length = timedelta(minutes=duration_minutes)
    cursor = opens
    while cursor + length <= closes:
        yield Slot(start=cursor, end=cursor + length, available=True)
        cursor += timedelta(minutes=step_minutes)
