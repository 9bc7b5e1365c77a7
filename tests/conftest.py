"""Shared test fixtures and builders."""

from datetime import datetime
from typing import Optional

import pytest

from scheduling_engine.schemas.booking_schema import (
    BookingRequest,
    BookingStatus,
    ExistingBooking,
    InteractionMode,
    Resource,
    ResourceStatus,
    TimeRange,
    Urgency,
    WorkingDay,
)
from scheduling_engine.verticals import create_engine

# Monday 2 March 2026, 08:00. Engine "now" for every validation test.
NOW = datetime(2026, 3, 2, 8, 0)
# Monday a week later, the default day being scheduled.
MONDAY = datetime(2026, 3, 9)
SATURDAY = datetime(2026, 3, 7)
SUNDAY = datetime(2026, 3, 8)


def at(day: datetime, clock: str) -> datetime:
    hour, minute = (int(part) for part in clock.split(":"))
    return day.replace(hour=hour, minute=minute)


def weekday_hours(
    start: str = "09:00", end: str = "17:00", breaks: Optional[list[tuple[str, str]]] = None
) -> dict[int, WorkingDay]:
    ranges = [TimeRange(start=s, end=e) for s, e in breaks or []]
    hours = {day: WorkingDay(is_working=True, start=start, end=end, breaks=ranges) for day in range(5)}
    hours[5] = WorkingDay(is_working=False)
    hours[6] = WorkingDay(is_working=False)
    return hours


def make_resource(
    resource_id: int = 1,
    name: Optional[str] = None,
    profession: str = "lawyer",
    specializations: Optional[list[str]] = None,
    hourly_rate: float = 200,
    working_hours: Optional[dict[int, WorkingDay]] = None,
    emergency: bool = False,
    rating: float = 4.0,
    experience_years: float = 5,
    total_bookings: int = 0,
    max_per_day: int = 8,
    status: ResourceStatus = ResourceStatus.ACTIVE,
) -> Resource:
    """Helper to create a Resource with sensible defaults."""
    return Resource(
        id=resource_id,
        name=name or f"Resource {resource_id}",
        profession=profession,
        specializations=specializations or [],
        hourly_rate=hourly_rate,
        working_hours=working_hours if working_hours is not None else weekday_hours(),
        available_for_emergency=emergency,
        rating=rating,
        experience_years=experience_years,
        total_bookings=total_bookings,
        max_bookings_per_day=max_per_day,
        status=status,
    )


def make_booking(
    resource_id: int,
    start: datetime,
    end: datetime,
    status: BookingStatus = BookingStatus.CONFIRMED,
    client_id: Optional[int] = None,
    category: str = "legal",
    urgency: Urgency = Urgency.STANDARD,
    room_id: Optional[int] = None,
    follow_up: bool = False,
) -> ExistingBooking:
    """Helper to create an ExistingBooking."""
    return ExistingBooking(
        resource_id=resource_id,
        room_id=room_id,
        client_id=client_id,
        start=start,
        end=end,
        status=status,
        category=category,
        urgency=urgency,
        follow_up_required=follow_up,
    )


def make_request(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    category: str = "tax",
    **overrides,
) -> BookingRequest:
    """A request that passes every check unless overridden."""
    start = start or at(MONDAY, "10:00")
    fields = {
        "start": start,
        "end": end or start.replace(hour=start.hour + 1),
        "category": category,
        "urgency": Urgency.STANDARD,
        "contact_phone": "0412 345 678",
        "interaction_mode": InteractionMode.IN_PERSON,
        "estimated_hours": 1,
    }
    fields.update(overrides)
    return BookingRequest(**fields)


@pytest.fixture
def engine():
    return create_engine("professional-services", clock=lambda: NOW)
