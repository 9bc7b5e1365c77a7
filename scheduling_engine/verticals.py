"""
Vertical registry: per-industry booking policy supplied by composition.

Each vertical contributes a VerticalProfile (rules, capability table,
business hours, complex categories). create_engine() builds a
SchedulingEngine from a registered profile; the engine itself knows
nothing about industries.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from scheduling_engine.engine import SchedulingEngine
from scheduling_engine.schemas.booking_schema import BookingRules, BusinessDay, BusinessHours
from scheduling_engine.scheduling.availability import (
    EMERGENCY_BUSINESS_HOURS,
    STANDARD_BUSINESS_HOURS,
)
from scheduling_engine.scheduling.matching import CapabilityMatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerticalProfile:
    """Policy and capability table for one industry vertical."""
    name: str
    rules: BookingRules
    profession_map: dict[str, list[str]]
    standard_hours: BusinessHours = field(default_factory=lambda: dict(STANDARD_BUSINESS_HOURS))
    emergency_hours: BusinessHours = field(default_factory=lambda: dict(EMERGENCY_BUSINESS_HOURS))
    complex_categories: frozenset[str] = frozenset()


_VERTICAL_REGISTRY: dict[str, VerticalProfile] = {}


def register_vertical(profile: VerticalProfile) -> None:
    """Register a vertical profile by name."""
    _VERTICAL_REGISTRY[profile.name] = profile
    logger.debug("Vertical registered: %s", profile.name)


def get_vertical(name: str) -> VerticalProfile:
    """Look up a registered vertical.

    Raises:
        KeyError: If the vertical name is not registered.
    """
    if name not in _VERTICAL_REGISTRY:
        registered = list(_VERTICAL_REGISTRY.keys())
        raise KeyError(f"Vertical '{name}' not registered. Available: {registered}")
    return _VERTICAL_REGISTRY[name]


def get_registered_verticals() -> list[str]:
    """Return names of all registered verticals."""
    return list(_VERTICAL_REGISTRY.keys())


def create_engine(name: str, clock: Optional[Callable[[], datetime]] = None) -> SchedulingEngine:
    """Build a SchedulingEngine for a registered vertical."""
    profile = get_vertical(name)
    kwargs = {"clock": clock} if clock is not None else {}
    return SchedulingEngine(
        rules=profile.rules,
        capability=CapabilityMatcher(profile.profession_map),
        standard_hours=profile.standard_hours,
        emergency_hours=profile.emergency_hours,
        complex_categories=profile.complex_categories,
        **kwargs,
    )


def _week(weekday: tuple[str, str], saturday: Optional[tuple[str, str]],
          sunday: Optional[tuple[str, str]]) -> BusinessHours:
    hours = {day: BusinessDay(is_open=True, open=weekday[0], close=weekday[1]) for day in range(5)}
    for day, window in ((5, saturday), (6, sunday)):
        hours[day] = (
            BusinessDay(is_open=True, open=window[0], close=window[1])
            if window else BusinessDay(is_open=False)
        )
    return hours


PROFESSIONAL_SERVICES = VerticalProfile(
    name="professional-services",
    rules=BookingRules(
        advance_booking_hours=4,
        max_advance_booking_days=90,
        cancellation_notice_hours=24,
        buffer_minutes=15,
        allow_double_booking=False,
        deposit_required=True,
    ),
    profession_map={
        "legal": ["lawyer"],
        "financial": ["accountant", "business-advisor"],
        "business": ["business-advisor", "accountant"],
        "tax": ["accountant"],
        "hr": ["hr-specialist"],
        "marketing": ["marketing-expert"],
        "technical": ["it-consultant"],
        "healthcare": ["doctor"],
        "other": [],
    },
    complex_categories=frozenset({"legal", "financial", "business"}),
)

SALON = VerticalProfile(
    name="salon",
    rules=BookingRules(
        advance_booking_hours=2,
        max_advance_booking_days=60,
        cancellation_notice_hours=24,
        buffer_minutes=15,
        allow_double_booking=False,
        deposit_required=False,
    ),
    profession_map={
        "haircut": ["hairstylist", "barber"],
        "coloring": ["colorist", "hairstylist"],
        "styling": ["hairstylist"],
        "treatment": ["hairstylist", "esthetician"],
        "nails": ["nail-technician"],
        "facial": ["esthetician"],
        "massage": ["massage-therapist"],
        "other": [],
    },
    standard_hours=_week(("09:00", "19:00"), ("09:00", "17:00"), None),
)

RESTAURANT = VerticalProfile(
    name="restaurant",
    rules=BookingRules(
        advance_booking_hours=1,
        max_advance_booking_days=30,
        cancellation_notice_hours=2,
        buffer_minutes=30,
        allow_double_booking=True,
        deposit_required=False,
        slot_step_minutes=30,
    ),
    profession_map={
        "dining": ["table"],
        "private-dining": ["private-room"],
        "bar": ["bar-seating"],
    },
    standard_hours=_week(("11:00", "22:00"), ("11:00", "23:00"), ("11:00", "21:00")),
)

EVENTS = VerticalProfile(
    name="events",
    rules=BookingRules(
        advance_booking_hours=48,
        max_advance_booking_days=365,
        cancellation_notice_hours=72,
        buffer_minutes=120,
        allow_double_booking=False,
        deposit_required=True,
    ),
    profession_map={
        "venue-rental": ["venue"],
        "catering": ["catering"],
        "decoration": ["setup"],
        "av-equipment": ["av-tech"],
        "coordination": ["coordinator", "manager"],
    },
    standard_hours=_week(("08:00", "23:00"), ("08:00", "23:00"), ("10:00", "22:00")),
    complex_categories=frozenset({"venue-rental", "coordination"}),
)

REAL_ESTATE = VerticalProfile(
    name="real-estate",
    rules=BookingRules(
        advance_booking_hours=2,
        max_advance_booking_days=60,
        cancellation_notice_hours=4,
        buffer_minutes=15,
        allow_double_booking=True,
        deposit_required=False,
    ),
    profession_map={
        "property-viewing": ["agent"],
        "open-house": ["agent"],
        "consultation": ["agent"],
        "appraisal": ["appraiser", "agent"],
        "inspection": ["inspector"],
    },
    standard_hours=_week(("09:00", "18:00"), ("09:00", "16:00"), ("10:00", "14:00")),
)

RETAIL = VerticalProfile(
    name="retail",
    rules=BookingRules(
        advance_booking_hours=2,
        max_advance_booking_days=30,
        cancellation_notice_hours=4,
        buffer_minutes=15,
        allow_double_booking=False,
        deposit_required=False,
    ),
    profession_map={
        "personal-shopping": ["personal-shopper", "stylist"],
        "styling": ["stylist"],
        "consultation": ["consultant", "stylist"],
        "fitting": ["fitter"],
        "alteration": ["fitter"],
        "custom-design": ["designer"],
    },
    standard_hours=_week(("10:00", "18:00"), ("10:00", "17:00"), ("11:00", "16:00")),
    complex_categories=frozenset({"custom-design"}),
)


def _auto_register() -> None:
    """Register the built-in verticals. Called once at import time."""
    for profile in (PROFESSIONAL_SERVICES, SALON, RESTAURANT, EVENTS, REAL_ESTATE, RETAIL):
        register_vertical(profile)


_auto_register()
